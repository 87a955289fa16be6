"""In-memory view of every known post, keyed by id.

Every operation here is synchronous, so on a single event loop a reader can
never interleave with a half-finished update. Posts are swapped for new
objects rather than mutated, which keeps lists handed out by ``all()``
internally consistent even after later updates.
"""

import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Optional

from shared.schemas import Post


@dataclass
class Snapshot:
    """The full post list from one successful poll."""
    posts: list[Post]
    # Monotonic time the fetch was started, not when it completed.
    requested_at: float = field(default_factory=time.monotonic)


def tally_dominates(local: Mapping[str, int], remote: Mapping[str, int]) -> bool:
    """True when ``local`` is >= ``remote`` for every reaction kind.

    A kind missing from either side counts as zero.
    """
    kinds = set(local) | set(remote)
    return all(local.get(kind, 0) >= remote.get(kind, 0) for kind in kinds)


class PostStore:
    def __init__(self):
        self._posts: dict[str, Post] = {}
        # Locally inserted post id -> monotonic time of insert, until a
        # snapshot confirms it.
        self._pending_local: dict[str, float] = {}
        self.revision = 0

    def __len__(self) -> int:
        return len(self._posts)

    def __contains__(self, post_id: object) -> bool:
        return post_id in self._posts

    def get(self, post_id: str) -> Optional[Post]:
        return self._posts.get(post_id)

    def all(self) -> list[Post]:
        return list(self._posts.values())

    def replace_from_snapshot(self, snapshot: Snapshot) -> None:
        """Adopt a freshly fetched snapshot.

        For posts known before and after, the local tally is kept when it
        dominates the snapshot's, so a snapshot that lags behind a just-issued
        reaction write does not flash the count backwards. Otherwise the
        snapshot is authoritative.

        Locally inserted posts missing from a snapshot that was requested
        before their insert are carried over; a newer snapshot that still
        lacks them means they are gone server-side.
        """
        merged: dict[str, Post] = {}
        for post in snapshot.posts:
            previous = self._posts.get(post.id)
            if previous is not None and tally_dominates(previous.reactions, post.reactions):
                post = post.model_copy(update={"reactions": dict(previous.reactions)})
            merged[post.id] = post
            self._pending_local.pop(post.id, None)

        for post_id, inserted_at in list(self._pending_local.items()):
            previous = self._posts.get(post_id)
            if previous is not None and inserted_at > snapshot.requested_at:
                merged[post_id] = previous
            else:
                del self._pending_local[post_id]

        self._posts = merged
        self.revision += 1

    def insert_local(self, post: Post) -> bool:
        """Add a just-submitted post ahead of the next poll.

        Returns False, leaving the store unchanged, if the id is already known.
        """
        if post.id in self._posts:
            return False
        self._posts = {post.id: post, **self._posts}
        self._pending_local[post.id] = time.monotonic()
        self.revision += 1
        return True

    def increment_reaction(self, post_id: str, kind: str) -> Optional[dict[str, int]]:
        """Add one to a single counter and return the new tally.

        Returns None when the post is unknown.
        """
        post = self._posts.get(post_id)
        if post is None:
            return None
        tally = dict(post.reactions)
        tally[kind] = tally.get(kind, 0) + 1
        self._posts[post_id] = post.model_copy(update={"reactions": tally})
        self.revision += 1
        return dict(tally)
