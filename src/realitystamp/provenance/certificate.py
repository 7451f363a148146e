"""Provenance certificates and their issuance gate."""

from __future__ import annotations

import json
import logging
import secrets
import string
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from realitystamp.errors import (
    AlreadySignedError,
    CertificateFormatError,
    EmptyContentError,
    InsufficientEntropyError,
)
from realitystamp.payload import ContentPayload, ContentType
from realitystamp.provenance.fingerprint import FINGERPRINT_WIDTH, fingerprint

if TYPE_CHECKING:
    from realitystamp.provenance.session import SigningSession

logger = logging.getLogger(__name__)

FULL_COVERAGE = 100
PROOF_PREFIX = "zkp-"
PROOF_LENGTH = 26
_PROOF_ALPHABET = string.digits + string.ascii_lowercase
_HEX_DIGITS = frozenset("0123456789abcdef")


def now_millis() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


def generate_proof_id() -> str:
    """Generate an opaque, unpredictable proof identifier."""
    return PROOF_PREFIX + "".join(secrets.choice(_PROOF_ALPHABET) for _ in range(PROOF_LENGTH))


@dataclass(frozen=True)
class ProvenanceCertificate:
    """Immutable record binding a fingerprint to an issuance time.

    ``original_fingerprint`` always equals ``fingerprint``; it is kept so
    a verifier can show the expected value next to a drifted one.
    """

    fingerprint: str
    content_type: ContentType
    issued_at: int
    proof_id: str
    original_fingerprint: str = ""

    def __post_init__(self):
        if not self.original_fingerprint:
            object.__setattr__(self, "original_fingerprint", self.fingerprint)
        if self.original_fingerprint != self.fingerprint:
            raise CertificateFormatError(
                "Certificate fingerprint does not match its original fingerprint",
                fingerprint=self.fingerprint,
                original_fingerprint=self.original_fingerprint,
            )

    def to_dict(self) -> dict[str, Any]:
        """Convert to the external representation."""
        return {
            "fingerprint": self.fingerprint,
            "contentType": self.content_type.value,
            "issuedAt": self.issued_at,
            "proofId": self.proof_id,
            "originalFingerprint": self.original_fingerprint,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProvenanceCertificate:
        """Create from the external representation.

        Raises:
            CertificateFormatError: If a field is missing or has the wrong type
        """
        if not isinstance(data, dict):
            raise CertificateFormatError(f"Certificate must be an object, got {type(data).__name__}")

        errors = []
        for key, expected in (("fingerprint", str), ("contentType", str), ("proofId", str)):
            if not isinstance(data.get(key), expected):
                errors.append(f"{key}: expected string")
        issued_at = data.get("issuedAt")
        if not isinstance(issued_at, int) or isinstance(issued_at, bool):
            errors.append("issuedAt: expected integer epoch millis")
        if errors:
            raise CertificateFormatError("Invalid certificate: " + "; ".join(errors), errors=errors)

        try:
            content_type = ContentType(data["contentType"])
        except ValueError:
            raise CertificateFormatError(f"Unknown content type: {data['contentType']}")

        # Fingerprints are emitted in lowercase; compare case-insensitively on load
        fp = data["fingerprint"].lower()
        original = data.get("originalFingerprint", fp)
        if not isinstance(original, str):
            raise CertificateFormatError("originalFingerprint: expected string")
        original = original.lower()

        for value in (fp, original):
            if not value or any(c not in _HEX_DIGITS for c in value):
                raise CertificateFormatError(f"Fingerprint is not a hex string: {value!r}")

        return cls(
            fingerprint=fp,
            content_type=content_type,
            issued_at=issued_at,
            proof_id=data["proofId"],
            original_fingerprint=original,
        )

    def write_json(self, path: Path) -> None:
        """Write certificate to JSON file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, sort_keys=True)

    @classmethod
    def from_json(cls, path: Path) -> ProvenanceCertificate:
        """Load certificate from JSON file."""
        with open(path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise CertificateFormatError(f"Invalid certificate JSON: {e}")
        return cls.from_dict(data)


class CertificateIssuer:
    """Gates certificate creation behind content presence and full entropy."""

    def __init__(
        self,
        clock: Callable[[], int] = now_millis,
        proof_factory: Callable[[], str] = generate_proof_id,
        fingerprint_width: int = FINGERPRINT_WIDTH,
    ) -> None:
        self.clock = clock
        self.proof_factory = proof_factory
        self.fingerprint_width = fingerprint_width

    def can_issue(self, payload: ContentPayload | None, coverage: int) -> None:
        """Check issuance preconditions.

        Raises:
            EmptyContentError: If there is no payload or the text is blank
            InsufficientEntropyError: If coverage is below 100
        """
        if payload is None or payload.is_empty():
            raise EmptyContentError()
        if coverage < FULL_COVERAGE:
            raise InsufficientEntropyError(
                f"Entropy collection is at {coverage}%; move across the whole canvas to reach 100%",
                coverage=coverage,
            )

    def issue(
        self,
        payload: ContentPayload | None,
        coverage: int,
        session: SigningSession | None = None,
    ) -> ProvenanceCertificate:
        """Issue a certificate for a payload.

        When a session is given, the certificate is recorded on it and
        the session refuses any further issuance until it is reset.

        Raises:
            AlreadySignedError: If the session already holds a certificate
            EmptyContentError: If there is no content
            InsufficientEntropyError: If coverage is below 100
        """
        if session is not None and session.signed:
            raise AlreadySignedError(session_id=session.session_id)

        self.can_issue(payload, coverage)

        value = fingerprint(payload, self.fingerprint_width)
        certificate = ProvenanceCertificate(
            fingerprint=value,
            content_type=payload.content_type,
            issued_at=self.clock(),
            proof_id=self.proof_factory(),
            original_fingerprint=value,
        )

        if session is not None:
            session.record_certificate(certificate)

        logger.info(
            "issued %s certificate %s (fingerprint %s)",
            certificate.content_type.value,
            certificate.proof_id,
            certificate.fingerprint,
        )
        return certificate
