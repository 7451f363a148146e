"""Tests for content fingerprints."""

from __future__ import annotations

from realitystamp.payload import ImagePayload, TextPayload, VideoPayload
from realitystamp.provenance.fingerprint import fingerprint, rolling_hash, truncate_fingerprint


class TestRollingHash:
    """Test the 32-bit rolling hash."""

    def test_empty_string(self):
        """Test the empty string hashes to zero."""
        assert rolling_hash("") == 0

    def test_known_value(self):
        """Test a well-known multiplier-31 hash value."""
        assert rolling_hash("hello") == 99162322

    def test_wraps_to_signed_32_bit(self):
        """Test overflow wraps around to the most negative 32-bit value."""
        assert rolling_hash("polygenelubricants") == -2147483648

    def test_astral_characters_hash_as_surrogate_pairs(self):
        """Test characters outside the BMP contribute two code units."""
        assert rolling_hash("\U0001F600") == 0xD83D * 31 + 0xDE00


class TestFingerprint:
    """Test fingerprint formatting and canonicalization."""

    def test_hello_is_deterministic(self):
        """Test hashing the same text twice yields identical output."""
        first = fingerprint(TextPayload("hello"))
        second = fingerprint(TextPayload("hello"))

        assert first == second == "0000000005e918d2"
        assert len(first) == 16

    def test_absolute_value_of_min_int(self):
        """Test the most negative hash renders as its magnitude."""
        assert fingerprint("polygenelubricants") == "0000000080000000"

    def test_text_payload_matches_raw_string(self):
        """Test text payloads hash their text verbatim."""
        assert fingerprint(TextPayload("abc")) == fingerprint("abc") == "0000000000017862"

    def test_binary_hashes_metadata_only(self):
        """Test binary payloads hash name, size and MIME type, not bytes."""
        a = ImagePayload(data=b"\x00" * 4, mime_type="image/png", name="cat.png")
        b = ImagePayload(data=b"\xff" * 4, mime_type="image/png", name="cat.png")

        assert a.canonical_string() == "cat.png-4-image/png"
        assert fingerprint(a) == fingerprint(b)

    def test_binary_metadata_changes_fingerprint(self):
        """Test a different name or MIME type changes the fingerprint."""
        base = VideoPayload(data=b"1234", mime_type="video/mp4", name="clip.mp4")

        assert fingerprint(base) != fingerprint(base.renamed("clip2.mp4"))
        assert fingerprint(base) != fingerprint(
            VideoPayload(data=b"1234", mime_type="video/webm", name="clip.mp4")
        )

    def test_known_collision(self):
        """Test the checksum is weak: "Aa" and "BB" collide."""
        assert fingerprint("Aa") == fingerprint("BB") == "0000000000000840"

    def test_custom_width_pads_but_never_truncates(self):
        """Test the width is a minimum."""
        assert fingerprint("hello", width=20) == "00000000000005e918d2"
        assert fingerprint("hello", width=4) == "5e918d2"


class TestTruncateFingerprint:
    """Test display truncation."""

    def test_short_values_unchanged(self):
        """Test values up to 16 characters are shown in full."""
        assert truncate_fingerprint("0000000005e918d2") == "0000000005e918d2"

    def test_long_values_elided(self):
        """Test long values keep the first and last 8 characters."""
        assert truncate_fingerprint("0123456789abcdef0123") == "01234567...cdef0123"

    def test_missing_value(self):
        """Test empty values render as N/A."""
        assert truncate_fingerprint(None) == "N/A"
        assert truncate_fingerprint("") == "N/A"
