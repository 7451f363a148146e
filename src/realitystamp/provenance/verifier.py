"""Trust verdicts for posts.

Verification is a pure function of a post's current state: it performs
no I/O, never raises and is recomputed on every display.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from realitystamp.provenance.fingerprint import FINGERPRINT_WIDTH, fingerprint

if TYPE_CHECKING:
    from realitystamp.feed.models import Post


class TrustVerdict(Enum):
    """Trust indicator state."""

    NOT_APPLICABLE = "not_applicable"  # No certificate, no badge
    VERIFIED = "verified"
    TAMPERED = "tampered"


STATUS_LABELS = {
    TrustVerdict.NOT_APPLICABLE: "UNVERIFIED",
    TrustVerdict.VERIFIED: "VERIFIED",
    TrustVerdict.TAMPERED: "TAMPERED - Hash Mismatch",
}


@dataclass(frozen=True)
class VerificationReport:
    """Verdict plus the fingerprints it was derived from."""

    post_id: str
    verdict: TrustVerdict
    expected_fingerprint: str | None = None
    current_fingerprint: str | None = None
    overridden: bool = False

    @property
    def status_label(self) -> str:
        return STATUS_LABELS[self.verdict]

    @property
    def fingerprint_matches(self) -> bool | None:
        if self.expected_fingerprint is None:
            return None
        return self.expected_fingerprint == self.current_fingerprint

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "post_id": self.post_id,
            "verdict": self.verdict.value,
            "status": self.status_label,
            "expected_fingerprint": self.expected_fingerprint,
            "current_fingerprint": self.current_fingerprint,
            "fingerprint_matches": self.fingerprint_matches,
            "overridden": self.overridden,
        }


class VerificationEngine:
    """Computes trust verdicts for posts."""

    def __init__(
        self,
        on_verdict: Callable[[str, TrustVerdict], None] | None = None,
        fingerprint_width: int = FINGERPRINT_WIDTH,
    ) -> None:
        self.on_verdict = on_verdict
        self.fingerprint_width = fingerprint_width

    def inspect(self, post: Post) -> VerificationReport:
        """Verify a post and return the full report."""
        certificate = post.certificate
        if certificate is None:
            report = VerificationReport(post_id=post.id, verdict=TrustVerdict.NOT_APPLICABLE)
        else:
            current = fingerprint(post.payload, self.fingerprint_width)
            if post.tampered_override:
                verdict = TrustVerdict.TAMPERED
            elif current != certificate.fingerprint:
                verdict = TrustVerdict.TAMPERED
            else:
                verdict = TrustVerdict.VERIFIED
            report = VerificationReport(
                post_id=post.id,
                verdict=verdict,
                expected_fingerprint=certificate.original_fingerprint,
                current_fingerprint=current,
                overridden=post.tampered_override,
            )

        if self.on_verdict is not None:
            self.on_verdict(post.id, report.verdict)
        return report

    def verify(self, post: Post) -> TrustVerdict:
        """Return the trust verdict for a post."""
        return self.inspect(post).verdict
