"""Deterministic content fingerprints.

The fingerprint is a 32-bit rolling checksum (multiplier 31) over the
UTF-16 code units of the payload's canonical string. It is fast and
reproducible but NOT cryptographic: it detects accidental or naive edits,
not a motivated forger. Binary payloads are fingerprinted by name, size
and MIME type only.
"""

from __future__ import annotations

from collections.abc import Iterator

from realitystamp.payload import ContentPayload

FINGERPRINT_WIDTH = 16

_MASK_32 = 0xFFFFFFFF
_SIGN_BIT = 0x80000000


def _utf16_code_units(text: str) -> Iterator[int]:
    """Yield the UTF-16 code units of a string (astral chars as surrogate pairs)."""
    data = text.encode("utf-16-le", "surrogatepass")
    for i in range(0, len(data), 2):
        yield data[i] | (data[i + 1] << 8)


def rolling_hash(text: str) -> int:
    """Compute the signed 32-bit rolling hash of a string."""
    h = 0
    for unit in _utf16_code_units(text):
        h = ((h << 5) - h + unit) & _MASK_32
        if h & _SIGN_BIT:
            h -= 1 << 32
    return h


def fingerprint(content: ContentPayload | str, width: int = FINGERPRINT_WIDTH) -> str:
    """Fingerprint a payload (or an already canonical string).

    Args:
        content: Payload to fingerprint, or its canonical string
        width: Minimum width; the hex value is left-padded with zeros
            and never truncated

    Returns:
        Lowercase hex fingerprint
    """
    canonical = content if isinstance(content, str) else content.canonical_string()
    return format(abs(rolling_hash(canonical)), "x").rjust(width, "0")


def truncate_fingerprint(value: str | None) -> str:
    """Shorten a fingerprint for display."""
    if not value:
        return "N/A"
    if len(value) <= 16:
        return value
    return f"{value[:8]}...{value[-8:]}"
