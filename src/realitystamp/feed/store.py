"""Post store with tamper simulation.

Tampering exists to demonstrate the trust indicator: it cannot be undone
except by recreating the post.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Iterator

from realitystamp.feed.models import Post
from realitystamp.payload import BinaryPayload, ContentPayload, TextPayload
from realitystamp.provenance.certificate import ProvenanceCertificate
from realitystamp.provenance.verifier import TrustVerdict, VerificationEngine, VerificationReport

logger = logging.getLogger(__name__)

TAMPER_SUFFIX = " [HACKED]"
TAMPER_TOKEN = "TAMPERED"
BINARY_TAMPER_SUFFIX = ".tampered"


def tamper_text(text: str, rng: random.Random) -> str:
    """Alter text the way an attacker editing a post would.

    Either appends a marker, or (for more than three words) replaces one
    word other than the last with a marker token.
    """
    if rng.random() > 0.5:
        return text + TAMPER_SUFFIX

    words = text.split(" ")
    if len(words) <= 3:
        return text + TAMPER_SUFFIX

    index = rng.randrange(len(words) - 1)
    words[index] = TAMPER_TOKEN
    return " ".join(words)


class PostStore:
    """Holds the feed and derives verdicts for its posts."""

    def __init__(
        self,
        engine: VerificationEngine | None = None,
        rng: random.Random | None = None,
        tamper_binary_payloads: bool = False,
    ) -> None:
        self.engine = engine or VerificationEngine()
        self.rng = rng or random.Random()
        self.tamper_binary_payloads = tamper_binary_payloads
        self._posts: dict[str, Post] = {}

    def __len__(self) -> int:
        return len(self._posts)

    def __contains__(self, post_id: object) -> bool:
        return post_id in self._posts

    def __iter__(self) -> Iterator[Post]:
        return iter(self._posts.values())

    def posts(self) -> list[Post]:
        """Posts in insertion order."""
        return list(self._posts.values())

    def get(self, post_id: str) -> Post | None:
        return self._posts.get(post_id)

    def add(self, post: Post) -> Post:
        if post.id in self._posts:
            raise ValueError(f"Duplicate post id: {post.id}")
        self._posts[post.id] = post
        return post

    def publish(
        self,
        certificate: ProvenanceCertificate,
        payload: ContentPayload,
        author: str = "You",
    ) -> Post:
        """Add freshly signed content to the feed."""
        post_id = f"post-{len(self._posts) + 1}"
        while post_id in self._posts:
            post_id += "-1"
        return self.add(Post(id=post_id, author=author, payload=payload, certificate=certificate))

    def simulate_tamper(self, post_id: str) -> bool:
        """Tamper with a verified post.

        No-op for unknown, unverified or already tampered posts.

        Returns:
            True if the post was tampered with
        """
        post = self._posts.get(post_id)
        if post is None or not post.verified or post.tampered_override:
            return False

        if isinstance(post.payload, TextPayload):
            post.payload = TextPayload(tamper_text(post.payload.text, self.rng))
        elif isinstance(post.payload, BinaryPayload) and self.tamper_binary_payloads:
            post.payload = post.payload.renamed(post.payload.name + BINARY_TAMPER_SUFFIX)

        post.tampered_override = True
        logger.info("simulated tamper on %s (%s)", post_id, post.content_type.value)
        return True

    def verify(self, post_id: str) -> TrustVerdict:
        """Verdict for a post; unknown posts have no certificate to check."""
        post = self._posts.get(post_id)
        if post is None:
            return TrustVerdict.NOT_APPLICABLE
        return self.engine.verify(post)

    def reports(self) -> list[VerificationReport]:
        """Verification reports for every post, in feed order."""
        return [self.engine.inspect(post) for post in self._posts.values()]

    def verdicts(self) -> dict[str, TrustVerdict]:
        return {report.post_id: report.verdict for report in self.reports()}
