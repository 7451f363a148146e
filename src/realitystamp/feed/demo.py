"""Demo feed content."""

from __future__ import annotations

from realitystamp.feed.models import Post
from realitystamp.feed.store import PostStore
from realitystamp.payload import ContentType, TextPayload
from realitystamp.provenance.certificate import ProvenanceCertificate, now_millis
from realitystamp.provenance.fingerprint import fingerprint

BOT_TEXT = "Check out this amazing new product! 🤖 #ad #sponsored #definitely-not-a-bot"
HUMAN_TEXT = "Just finished my morning run! The sunrise was absolutely beautiful today. 🌅"
HUMAN_PROOF_ID = "zkp-verified-human-12345"

HOUR_MS = 60 * 60 * 1000


def seed_demo_feed(store: PostStore, now: int | None = None) -> list[Post]:
    """Add the two stock posts: an unverified bot and a verified human.

    The human post was "signed" an hour before ``now``.
    """
    now = now if now is not None else now_millis()

    bot = Post(id="post-1", author="AI_ContentBot_3000", payload=TextPayload(BOT_TEXT))
    human = Post(
        id="post-2",
        author="Sarah_Chen",
        payload=TextPayload(HUMAN_TEXT),
        certificate=ProvenanceCertificate(
            fingerprint=fingerprint(HUMAN_TEXT, store.engine.fingerprint_width),
            content_type=ContentType.TEXT,
            issued_at=now - HOUR_MS,
            proof_id=HUMAN_PROOF_ID,
        ),
    )
    return [store.add(bot), store.add(human)]
