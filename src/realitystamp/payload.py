"""Content payloads captured for fingerprinting."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class ContentType(Enum):
    """Kind of content bound to a certificate."""

    TEXT = "text"
    IMAGE = "image"
    VIDEO = "video"


def content_type_for_mime(mime_type: str) -> ContentType:
    """Derive the content type from a declared MIME type.

    Anything that is not ``image/*`` is treated as video, matching the
    upload form which only accepts images and videos.
    """
    if mime_type.startswith("image/"):
        return ContentType.IMAGE
    return ContentType.VIDEO


@dataclass(frozen=True)
class TextPayload:
    """Plain text content."""

    text: str

    @property
    def content_type(self) -> ContentType:
        return ContentType.TEXT

    def canonical_string(self) -> str:
        return self.text

    def is_empty(self) -> bool:
        return not self.text.strip()


@dataclass(frozen=True)
class BinaryPayload:
    """Uploaded file content.

    Only the name, size and MIME type take part in the canonical
    representation; the bytes themselves are never hashed.
    """

    data: bytes
    mime_type: str
    name: str

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def content_type(self) -> ContentType:
        return content_type_for_mime(self.mime_type)

    def canonical_string(self) -> str:
        return f"{self.name}-{self.size}-{self.mime_type}"

    def is_empty(self) -> bool:
        return False

    def renamed(self, name: str) -> BinaryPayload:
        """Return a copy of this payload under a different file name."""
        return type(self)(data=self.data, mime_type=self.mime_type, name=name)


@dataclass(frozen=True)
class ImagePayload(BinaryPayload):
    """Uploaded image."""

    @property
    def content_type(self) -> ContentType:
        return ContentType.IMAGE


@dataclass(frozen=True)
class VideoPayload(BinaryPayload):
    """Uploaded video."""

    @property
    def content_type(self) -> ContentType:
        return ContentType.VIDEO


ContentPayload = Union[TextPayload, ImagePayload, VideoPayload]


def binary_payload(data: bytes, mime_type: str, name: str) -> ImagePayload | VideoPayload:
    """Build an image or video payload according to its MIME type."""
    if content_type_for_mime(mime_type) is ContentType.IMAGE:
        return ImagePayload(data=data, mime_type=mime_type, name=name)
    return VideoPayload(data=data, mime_type=mime_type, name=name)
