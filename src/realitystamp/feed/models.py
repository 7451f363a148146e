"""Feed post model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from realitystamp.payload import BinaryPayload, ContentPayload, ContentType
from realitystamp.provenance.certificate import ProvenanceCertificate


@dataclass
class Post:
    """A content item in the feed.

    ``verified`` is fixed at construction from whether a certificate was
    attached; only ``payload`` and ``tampered_override`` change afterwards.
    """

    id: str
    author: str
    payload: ContentPayload
    certificate: ProvenanceCertificate | None = None
    tampered_override: bool = False
    _verified: bool = field(init=False, repr=False)

    def __post_init__(self):
        self._verified = self.certificate is not None

    @property
    def verified(self) -> bool:
        return self._verified

    @property
    def content_type(self) -> ContentType:
        return self.payload.content_type

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        result: dict[str, Any] = {
            "id": self.id,
            "author": self.author,
            "contentType": self.content_type.value,
            "verified": self.verified,
            "tampered": self.tampered_override,
        }
        if isinstance(self.payload, BinaryPayload):
            result["content"] = {
                "name": self.payload.name,
                "size": self.payload.size,
                "mimeType": self.payload.mime_type,
            }
        else:
            result["content"] = self.payload.text
        if self.certificate is not None:
            result["certificate"] = self.certificate.to_dict()
        return result
