"""Display ordering for the feed."""

from collections.abc import Iterable
from enum import Enum
from typing import Union

from shared.schemas import Post


class SortMode(str, Enum):
    NEWEST = "newest"
    OLDEST = "oldest"
    TOP = "top"

    @classmethod
    def parse(cls, value: Union[str, "SortMode", None]) -> "SortMode":
        """Unknown or missing modes sort as newest."""
        try:
            return cls(value)
        except ValueError:
            return cls.NEWEST


def total_reactions(post: Post) -> int:
    # Recomputed on every call; tallies change between renders.
    return sum(count or 0 for count in post.reactions.values())


def order(posts: Iterable[Post], mode: Union[str, SortMode] = SortMode.NEWEST) -> list[Post]:
    """Return posts in display order. Pure and stable; the input is not modified."""
    mode = SortMode.parse(mode)
    if mode is SortMode.OLDEST:
        return sorted(posts, key=lambda p: p.created_at)
    if mode is SortMode.TOP:
        return sorted(posts, key=lambda p: (total_reactions(p), p.created_at), reverse=True)
    return sorted(posts, key=lambda p: p.created_at, reverse=True)
