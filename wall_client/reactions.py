"""Optimistic reaction counting with write-through to the store."""

import asyncio
from typing import Optional

from shared.catalog import REACTION_IDS
from wall_client.errors import ReactionWriteFailed
from wall_client.logging_setup import get_logger
from wall_client.post_store import PostStore
from wall_client.store_client import PostTable

log = get_logger(__name__)


class ReactionAggregator:
    """Applies reaction clicks locally first, then writes the full tally.

    A failed write is logged and the local increment stands. The local count
    may run ahead of the store until a later snapshot settles it through the
    PostStore reconciliation rule. Counts are global, so the same identity
    may react to the same post any number of times.
    """

    def __init__(self, client: PostTable, store: PostStore):
        self.client = client
        self.store = store
        self.failed_writes = 0
        self._pending: set[asyncio.Task] = set()
        self._post_locks: dict[str, asyncio.Lock] = {}
        self._writers: dict[str, int] = {}

    def react(self, post_id: str, kind: str) -> Optional[dict[str, int]]:
        """Count one reaction. Returns the new tally, or None if nothing changed."""
        if kind not in REACTION_IDS:
            log.warning("reaction_kind_unknown", post_id=post_id, kind=kind)
            return None

        tally = self.store.increment_reaction(post_id, kind)
        if tally is None:
            log.warning("reaction_target_missing", post_id=post_id, kind=kind)
            return None

        task = asyncio.create_task(self._write(post_id, tally))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return tally

    async def _write(self, post_id: str, tally: dict[str, int]) -> None:
        # Writes for one post go out in click order so a slow early write
        # cannot land after a later one.
        lock = self._post_locks.setdefault(post_id, asyncio.Lock())
        self._writers[post_id] = self._writers.get(post_id, 0) + 1
        try:
            async with lock:
                try:
                    await self.client.update_reactions(post_id, tally)
                except ReactionWriteFailed as e:
                    self.failed_writes += 1
                    log.warning("reaction_write_failed", post_id=post_id, error=str(e))
        finally:
            self._writers[post_id] -= 1
            if not self._writers[post_id]:
                del self._writers[post_id]
                del self._post_locks[post_id]

    @property
    def pending_writes(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for every in-flight reaction write to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
