"""Latest-snapshot cache, recomputed whenever the ledger changes."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from kharcha.schemas.snapshot import LedgerCollections, SnapshotState
from kharcha.services.change_feed import ChangeFeed
from kharcha.services.snapshot_service import build_state
from kharcha.utils.errors import AppError
from kharcha.utils.time import now_utc

logger = logging.getLogger(__name__)

Fetcher = Callable[[], Awaitable[LedgerCollections]]


class SnapshotCache:
    """Holds the published ``SnapshotState`` and refreshes it on change.

    Every refresh is a full recompute. Refreshes may overlap; a result is only
    published if no newer refresh was started while it was fetching, so a slow
    read can never overwrite fresher data. The state object is immutable and
    swapped in one assignment.
    """

    def __init__(self, fetch: Fetcher) -> None:
        self._fetch = fetch
        self._state = SnapshotState()
        self._started = 0
        self._loop: asyncio.AbstractEventLoop | None = None
        self._tasks: set[asyncio.Task] = set()
        self._unsubscribe: Callable[[], None] | None = None

    @property
    def state(self) -> SnapshotState:
        return self._state

    async def refresh(self) -> SnapshotState:
        """Fetch current collections, recompute and publish if still the latest."""
        self._started += 1
        generation = self._started
        try:
            collections = await self._fetch()
        except Exception as exc:
            if generation != self._started:
                return self._state
            message = exc.message if isinstance(exc, AppError) else "Could not refresh totals"
            logger.warning("Snapshot refresh %s failed: %s", generation, exc)
            # Keep the last good numbers on screen, flagged as stale.
            self._state = self._state.model_copy(
                update={"stale": True, "error": message, "generation": generation}
            )
            return self._state

        if generation != self._started:
            logger.debug("Discarding superseded snapshot %s", generation)
            return self._state

        self._state = build_state(collections, generation=generation, refreshed_at=now_utc())
        logger.info(
            "Snapshot %s refreshed: remaining=%s spent=%s",
            generation,
            self._state.snapshot.remaining,
            self._state.snapshot.total_spent,
        )
        return self._state

    def _spawn_refresh(self) -> None:
        task = asyncio.ensure_future(self.refresh())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def notify(self, collection: str) -> None:
        """Change-feed callback; safe to call from any thread."""
        loop = self._loop
        if loop is None or loop.is_closed():
            logger.debug("Ignoring change to %s; cache not started", collection)
            return

        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is loop:
            self._spawn_refresh()
        else:
            loop.call_soon_threadsafe(self._spawn_refresh)

    async def start(self, feed: ChangeFeed | None = None) -> SnapshotState:
        """Bind to the running loop, subscribe to ``feed`` and compute once."""
        self._loop = asyncio.get_running_loop()
        if feed is not None:
            self._unsubscribe = feed.subscribe(self.notify)
        return await self.refresh()

    async def stop(self) -> None:
        """Unsubscribe and wait for in-flight refreshes to settle."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        self._loop = None

    async def wait_idle(self) -> None:
        """Wait until every spawned refresh has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
