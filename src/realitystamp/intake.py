"""Content intake validation for uploaded files.

Enforces the limits every upload must satisfy before it can be
fingerprinted:
- Size ceiling (10 MiB by default)
- Image and video MIME allow-lists
"""

from __future__ import annotations

import mimetypes
from pathlib import Path
from typing import Any

from realitystamp.errors import OversizeContentError, UnsupportedFormatError
from realitystamp.payload import ContentType, ImagePayload, VideoPayload, binary_payload, content_type_for_mime

# Default intake limits
DEFAULT_MAX_CONTENT_SIZE = 10 * 1024 * 1024  # 10 MiB
DEFAULT_IMAGE_FORMATS = ("image/png", "image/jpeg", "image/jpg", "image/gif")
DEFAULT_VIDEO_FORMATS = ("video/mp4", "video/webm")

FORMAT_HINTS = {
    ContentType.IMAGE: "Unsupported format. Please upload PNG, JPG, or GIF for images.",
    ContentType.VIDEO: "Unsupported format. Please upload MP4 or WEBM for videos.",
}


class IntakeLimits:
    """Configurable intake limits."""

    def __init__(
        self,
        max_content_size: int = DEFAULT_MAX_CONTENT_SIZE,
        image_formats: tuple[str, ...] = DEFAULT_IMAGE_FORMATS,
        video_formats: tuple[str, ...] = DEFAULT_VIDEO_FORMATS,
    ) -> None:
        if max_content_size < 1:
            raise ValueError(f"max_content_size must be >= 1, got {max_content_size}")
        self.max_content_size = max_content_size
        self.image_formats = tuple(image_formats)
        self.video_formats = tuple(video_formats)

    def allowed_formats(self, content_type: ContentType) -> tuple[str, ...]:
        if content_type is ContentType.IMAGE:
            return self.image_formats
        if content_type is ContentType.VIDEO:
            return self.video_formats
        return ()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "max_content_size": self.max_content_size,
            "image_formats": list(self.image_formats),
            "video_formats": list(self.video_formats),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> IntakeLimits:
        """Create from dictionary."""
        return cls(
            max_content_size=int(data.get("max_content_size", DEFAULT_MAX_CONTENT_SIZE)),
            image_formats=tuple(data.get("image_formats", DEFAULT_IMAGE_FORMATS)),
            video_formats=tuple(data.get("video_formats", DEFAULT_VIDEO_FORMATS)),
        )


def validate_upload(
    name: str,
    mime_type: str,
    size: int,
    expected: ContentType | None = None,
    limits: IntakeLimits | None = None,
) -> ContentType:
    """Check an upload against the intake limits.

    Args:
        name: File name as supplied by the user
        mime_type: Declared MIME type
        size: Size in bytes
        expected: Upload slot the file was chosen for (image or video).
            If None, the slot is derived from the MIME type.
        limits: Intake limits

    Returns:
        Content type of the accepted upload

    Raises:
        OversizeContentError: If the file exceeds the size ceiling
        UnsupportedFormatError: If the MIME type is not allowed for the slot
    """
    limits = limits or IntakeLimits()

    if size > limits.max_content_size:
        raise OversizeContentError(
            name=name,
            size=size,
            max_content_size=limits.max_content_size,
        )

    content_type = expected or content_type_for_mime(mime_type)
    if mime_type not in limits.allowed_formats(content_type):
        raise UnsupportedFormatError(
            FORMAT_HINTS.get(content_type, UnsupportedFormatError.default_message),
            name=name,
            mime_type=mime_type,
        )

    return content_type


def load_upload(
    path: Path,
    mime_type: str | None = None,
    expected: ContentType | None = None,
    limits: IntakeLimits | None = None,
) -> ImagePayload | VideoPayload:
    """Read a file from disk into a validated binary payload.

    The size is checked before the file is read.

    Raises:
        OversizeContentError: If the file is too large
        UnsupportedFormatError: If the MIME type is unknown or not allowed
    """
    limits = limits or IntakeLimits()

    if mime_type is None:
        mime_type, _ = mimetypes.guess_type(str(path))
    if not mime_type:
        raise UnsupportedFormatError(f"Cannot determine file type of {path.name}", name=path.name)

    size = path.stat().st_size
    validate_upload(path.name, mime_type, size, expected=expected, limits=limits)

    return binary_payload(path.read_bytes(), mime_type, path.name)
