"""Feed of posts with trust verdicts and tamper simulation."""

from __future__ import annotations

from realitystamp.feed.demo import seed_demo_feed
from realitystamp.feed.models import Post
from realitystamp.feed.store import PostStore, tamper_text

__all__ = [
    "Post",
    "PostStore",
    "seed_demo_feed",
    "tamper_text",
]
