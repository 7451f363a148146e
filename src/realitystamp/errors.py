"""Error kinds raised by the provenance engine.

Every error carries a stable, machine-readable code alongside the
human-readable message shown to the user.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Stable error codes.

    Format: DOMAIN_DETAIL
    """

    CONTENT_EMPTY = "CONTENT_EMPTY"
    CONTENT_OVERSIZE = "CONTENT_OVERSIZE"
    CONTENT_UNSUPPORTED_FORMAT = "CONTENT_UNSUPPORTED_FORMAT"
    ENTROPY_INSUFFICIENT = "ENTROPY_INSUFFICIENT"
    SESSION_ALREADY_SIGNED = "SESSION_ALREADY_SIGNED"
    CERTIFICATE_INVALID_FORMAT = "CERTIFICATE_INVALID_FORMAT"


class ProvenanceError(Exception):
    """Base class for recoverable provenance errors."""

    code: ErrorCode = ErrorCode.CONTENT_EMPTY
    default_message = "Provenance error"

    def __init__(self, message: str | None = None, **details: Any) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        result: dict[str, Any] = {
            "code": self.code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = dict(sorted(self.details.items()))
        return result


class EmptyContentError(ProvenanceError):
    """No content was supplied for signing."""

    code = ErrorCode.CONTENT_EMPTY
    default_message = "Please enter content or upload a file before signing"


class InsufficientEntropyError(ProvenanceError):
    """Entropy coverage is below the issuance gate."""

    code = ErrorCode.ENTROPY_INSUFFICIENT
    default_message = "Entropy collection is not complete"


class AlreadySignedError(ProvenanceError):
    """A certificate was already issued in this signing session."""

    code = ErrorCode.SESSION_ALREADY_SIGNED
    default_message = "Content already signed; reset the session to sign new content"


class UnsupportedFormatError(ProvenanceError):
    """Declared MIME type is outside the accepted allow-list."""

    code = ErrorCode.CONTENT_UNSUPPORTED_FORMAT
    default_message = "Unsupported format"


class OversizeContentError(ProvenanceError):
    """Payload exceeds the configured size ceiling."""

    code = ErrorCode.CONTENT_OVERSIZE
    default_message = "File size exceeds 10MB limit. Please choose a smaller file."


class CertificateFormatError(ProvenanceError):
    """Certificate representation could not be parsed."""

    code = ErrorCode.CERTIFICATE_INVALID_FORMAT
    default_message = "Invalid certificate format"
