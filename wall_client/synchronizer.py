"""Polls the posts table and reconciles each snapshot into the PostStore."""

import asyncio
import contextlib
import time
from typing import Callable, Optional

from wall_client.errors import FetchFailed
from wall_client.logging_setup import get_logger
from wall_client.post_store import PostStore, Snapshot
from wall_client.store_client import PostTable, parse_records

log = get_logger(__name__)


class FeedSynchronizer:
    """Keeps the PostStore close to the store with a cancelable polling loop.

    A failed fetch leaves the store untouched (stale data beats an empty
    feed) and the loop simply tries again on its next tick. Repeated failures
    stretch the delay between ticks, up to ``max_backoff`` seconds.
    """

    def __init__(
        self,
        client: PostTable,
        store: PostStore,
        interval: float = 5.0,
        max_backoff: float = 60.0,
        on_error: Optional[Callable[[FetchFailed], None]] = None,
    ) -> None:
        self.client = client
        self.store = store
        self.interval = interval
        self.max_backoff = max(max_backoff, interval)
        self.on_error = on_error

        self.has_loaded = False
        self.last_error: Optional[FetchFailed] = None
        self.consecutive_failures = 0

        self._wake = asyncio.Event()
        self._task: Optional[asyncio.Task] = None
        self._stopped = False

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def poll_once(self) -> Optional[Snapshot]:
        """Fetch one snapshot and apply it. Returns None if nothing was applied."""
        requested_at = time.monotonic()
        try:
            records = await self.client.fetch_all()
        except FetchFailed as e:
            self._record_failure(e)
            return None

        if self._stopped:
            log.debug("poll_result_discarded", records=len(records))
            return None

        snapshot = Snapshot(posts=parse_records(records), requested_at=requested_at)
        self.store.replace_from_snapshot(snapshot)
        self.has_loaded = True
        self.last_error = None
        self.consecutive_failures = 0
        log.debug("poll_applied", posts=len(snapshot.posts))
        return snapshot

    def _record_failure(self, error: FetchFailed) -> None:
        self.last_error = error
        self.consecutive_failures += 1
        log.warning(
            "poll_failed",
            error=str(error),
            consecutive_failures=self.consecutive_failures,
        )
        if self.on_error is not None:
            try:
                self.on_error(error)
            except Exception as e:
                log.warning("poll_error_callback_failed", error=str(e))

    def next_delay(self) -> float:
        if self.consecutive_failures == 0:
            return self.interval
        return min(self.interval * 2 ** self.consecutive_failures, self.max_backoff)

    def request_refresh(self) -> None:
        """Wake the loop for an immediate poll instead of waiting for the tick."""
        self._wake.set()

    def start(self) -> None:
        if self.running:
            return
        self._stopped = False
        self._task = asyncio.create_task(self._run())

    async def _run(self) -> None:
        while not self._stopped:
            self._wake.clear()
            try:
                await self.poll_once()
            except Exception as e:
                # One bad tick must not end polling.
                log.error("poll_tick_crashed", error=str(e))
            try:
                await asyncio.wait_for(self._wake.wait(), timeout=self.next_delay())
            except asyncio.TimeoutError:
                pass

    async def stop(self) -> None:
        """Cancel polling. A fetch still in flight is never applied."""
        self._stopped = True
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        log.info("polling_stopped")
