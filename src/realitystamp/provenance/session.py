"""Signing sessions.

A session owns everything that used to be ambient UI state while content
is being signed: the entropy collector, the submitted content and the
single-shot "signed" flag. All operations are synchronous; the caller
drives the session with explicit method calls.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from realitystamp.config import EngineConfig
from realitystamp.errors import ProvenanceError
from realitystamp.payload import ContentPayload
from realitystamp.provenance.certificate import FULL_COVERAGE, CertificateIssuer, ProvenanceCertificate
from realitystamp.provenance.entropy import EntropyCollector
from realitystamp.provenance.verifier import TrustVerdict

logger = logging.getLogger(__name__)


@dataclass
class SessionEvents:
    """Callbacks the presentation layer subscribes to."""

    entropy_changed: list[Callable[[int], None]] = field(default_factory=list)
    certificate_issued: list[Callable[[ProvenanceCertificate], None]] = field(default_factory=list)
    issue_failed: list[Callable[[ProvenanceError], None]] = field(default_factory=list)
    verdict_computed: list[Callable[[str, TrustVerdict], None]] = field(default_factory=list)

    def subscribe(self, event: str, callback: Callable[..., None]) -> None:
        """Register a callback for an event by name."""
        listeners = getattr(self, event, None)
        if not isinstance(listeners, list):
            raise ValueError(f"Unknown session event: {event}")
        listeners.append(callback)

    def emit(self, event: str, *args: Any) -> None:
        for callback in getattr(self, event):
            callback(*args)

    def verdict_callback(self) -> Callable[[str, TrustVerdict], None]:
        """Callback to pass as ``VerificationEngine(on_verdict=...)``."""
        return lambda post_id, verdict: self.emit("verdict_computed", post_id, verdict)


class SigningSession:
    """One content item being signed.

    Issuance is a one-way transition: once a certificate is recorded the
    session refuses to sign again until ``request_reset`` starts a fresh
    session. Resetting never revokes a certificate already handed out.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        issuer: CertificateIssuer | None = None,
        events: SessionEvents | None = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.issuer = issuer or CertificateIssuer(fingerprint_width=self.config.fingerprint_width)
        self.events = events or SessionEvents()
        self.collector = EntropyCollector(
            cell_size=self.config.cell_size,
            surface_width=self.config.surface_width,
            surface_height=self.config.surface_height,
            on_change=self._on_entropy_changed,
        )
        self.session_id = uuid.uuid4().hex
        self.payload: ContentPayload | None = None
        self.certificate: ProvenanceCertificate | None = None

    @property
    def signed(self) -> bool:
        return self.certificate is not None

    @property
    def coverage(self) -> int:
        return self.collector.coverage

    # Input contract

    def report_position(self, x: float, y: float) -> int:
        return self.collector.report_position(x, y)

    def resize_surface(self, width: int, height: int) -> None:
        self.collector.resize(width, height)

    def submit_content(self, payload: ContentPayload | None) -> None:
        """Set (or clear) the content to be signed."""
        self.payload = payload
        self._maybe_auto_issue(self.coverage)

    def request_issue(self) -> ProvenanceCertificate | None:
        """Try to issue a certificate for the submitted content.

        Failures are reported through ``issue_failed`` and leave the
        session untouched.

        Returns:
            The new certificate, or None if issuance was refused
        """
        try:
            certificate = self.issuer.issue(self.payload, self.coverage, session=self)
        except ProvenanceError as e:
            logger.warning("issuance refused for session %s: %s", self.session_id, e.message)
            self.events.emit("issue_failed", e)
            return None

        self.events.emit("certificate_issued", certificate)
        return certificate

    def request_reset(self) -> None:
        """Discard content and entropy and start a new signing session."""
        self.payload = None
        self.certificate = None
        self.session_id = uuid.uuid4().hex
        self.collector.reset()
        logger.debug("session reset, new session %s", self.session_id)

    # Issuer callback

    def record_certificate(self, certificate: ProvenanceCertificate) -> None:
        """Bind a freshly issued certificate and stop collecting entropy."""
        self.certificate = certificate
        self.collector.suspend()

    def _on_entropy_changed(self, coverage: int) -> None:
        self.events.emit("entropy_changed", coverage)
        self._maybe_auto_issue(coverage)

    def _maybe_auto_issue(self, coverage: int) -> None:
        if (
            self.config.auto_issue
            and coverage >= FULL_COVERAGE
            and not self.signed
            and self.payload is not None
            and not self.payload.is_empty()
        ):
            self.request_issue()
