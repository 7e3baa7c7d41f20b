"""Application query – OrderingFrontierTracker.

Ordering values are assigned before a write commits, and a write may abort.
At any instant the journal can therefore show a hole at some ordering ``O``
that is either still in flight (and will fill shortly) or permanently vacant.
Reading past such a hole would let a tag query skip the event that later
fills it.

The tracker polls the committed ordering values in the background and
publishes the *frontier*: the highest ordering below which no hole can still
fill. A hole younger than ``gap_give_up`` blocks the frontier; an older one
is treated as vacant and skipped. The frontier never moves backwards.

One tracker is shared by all tag queries of a :class:`ReadJournal`.
"""

from __future__ import annotations

import asyncio
import dataclasses
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any

from journal_query.kernel.errors import FrontierTimeoutError
from journal_query.kernel.time import Clock, SystemClock
from journal_query.observability.logging import get_logger

if TYPE_CHECKING:
    from journal_query.application.query.store import JournalStore
    from journal_query.config.settings import ReadJournalSettings

logger = get_logger(__name__)


@dataclasses.dataclass(frozen=True)
class MaxOrderingSnapshot:
    """No event with ``ordering <= max_ordering`` can still appear."""

    max_ordering: int


@dataclasses.dataclass(frozen=True)
class _Gap:
    low: int
    high: int
    since: datetime


class OrderingFrontierTracker:
    """Background task computing the gap-free ordering frontier.

    Parameters
    ----------
    store:
        Journal to poll through :meth:`JournalStore.ordering_ids`.
    query_delay:
        Seconds between polls once caught up.
    batch_size:
        Ordering ids read per poll; a full batch triggers an immediate re-poll.
    gap_give_up:
        Seconds a hole may stay open before it is treated as vacant.
    max_backoff_query_delay:
        Ceiling for the doubling delay applied after failed polls.
    clock:
        Time source used to age holes (``SystemClock`` by default).
    """

    def __init__(
        self,
        store: JournalStore,
        *,
        query_delay: float = 1.0,
        batch_size: int = 10000,
        gap_give_up: float = 10.0,
        max_backoff_query_delay: float = 60.0,
        clock: Clock | None = None,
        initial_frontier: int = 0,
    ) -> None:
        self._store = store
        self._query_delay = query_delay
        self._batch_size = batch_size
        self._gap_give_up = timedelta(seconds=gap_give_up)
        self._max_backoff = max_backoff_query_delay
        self._clock: Clock = clock or SystemClock()
        self._frontier = MaxOrderingSnapshot(initial_frontier)
        self._max_seen = initial_frontier
        self._gaps: list[_Gap] = []
        self._ready = asyncio.Event()
        self._task: asyncio.Task[None] | None = None

    @classmethod
    def from_settings(
        cls,
        store: JournalStore,
        settings: ReadJournalSettings,
        clock: Clock | None = None,
    ) -> OrderingFrontierTracker:
        return cls(
            store,
            query_delay=settings.query_delay,
            batch_size=settings.journal_sequence_batch_size,
            gap_give_up=settings.gap_give_up,
            max_backoff_query_delay=settings.max_backoff_query_delay,
            clock=clock,
        )

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def frontier(self) -> MaxOrderingSnapshot:
        """Latest published frontier, without waiting for the first poll."""
        return self._frontier

    @property
    def max_seen(self) -> int:
        """Highest ordering value observed in the store so far."""
        return self._max_seen

    @property
    def pending_gaps(self) -> list[tuple[int, int]]:
        """Holes above the frontier, as inclusive ``(low, high)`` ranges."""
        return [(gap.low, gap.high) for gap in self._gaps]

    async def current_frontier(self, timeout: float | None = None) -> MaxOrderingSnapshot:
        """Return the frontier, waiting at most *timeout* for the first poll.

        Raises :class:`FrontierTimeoutError` when no poll has completed in
        time. Callers treat that as transient and ask again later.
        """
        if not self._ready.is_set():
            try:
                await asyncio.wait_for(self._ready.wait(), timeout)
            except asyncio.TimeoutError as exc:
                raise FrontierTimeoutError(timeout if timeout is not None else 0.0) from exc
        return self._frontier

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start the background polling loop (no-op when already running)."""
        if self.is_running:
            return
        # An Event binds to the loop that first waits on it; start may run
        # under a new loop.
        ready = asyncio.Event()
        if self._ready.is_set():
            ready.set()
        self._ready = ready
        self._task = asyncio.create_task(self._run(), name="ordering-frontier-tracker")

    async def stop(self) -> None:
        """Cancel the background polling loop and wait for it to finish."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def __aenter__(self) -> OrderingFrontierTracker:
        await self.start()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.stop()

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    async def poll_once(self) -> bool:
        """Read the next window of ordering ids and advance the frontier.

        Returns ``True`` when the window was full and nothing blocked the
        frontier, i.e. when another poll should follow right away.
        """
        start = self._frontier.max_ordering
        ids = await self._store.ordering_ids(start, self._batch_size)
        now = self._clock.now()

        gaps: list[_Gap] = []
        frontier = start
        blocked = False
        expected = start + 1
        for ordering in ids:
            if ordering > expected:
                gap = _Gap(expected, ordering - 1, self._open_since(expected, ordering - 1, now))
                gaps.append(gap)
                if not blocked:
                    if now - gap.since < self._gap_give_up:
                        blocked = True
                    else:
                        logger.warning(
                            "frontier.gap_given_up",
                            low=gap.low,
                            high=gap.high,
                            open_seconds=(now - gap.since).total_seconds(),
                        )
            if not blocked:
                frontier = ordering
            expected = ordering + 1

        self._gaps = [gap for gap in gaps if gap.low > frontier]
        if ids:
            self._max_seen = max(self._max_seen, ids[-1])
        self._advance(frontier)
        self._ready.set()
        return len(ids) >= self._batch_size and not blocked

    def _open_since(self, low: int, high: int, now: datetime) -> datetime:
        # Holes only shrink as writes commit, so an overlapping hole from an
        # earlier poll carries the earliest first-seen time.
        return min(
            (gap.since for gap in self._gaps if gap.low <= high and low <= gap.high),
            default=now,
        )

    def _advance(self, max_ordering: int) -> None:
        if max_ordering <= self._frontier.max_ordering:
            return
        logger.debug(
            "frontier.advanced",
            previous=self._frontier.max_ordering,
            max_ordering=max_ordering,
        )
        self._frontier = MaxOrderingSnapshot(max_ordering)

    async def _run(self) -> None:
        failures = 0
        while True:
            try:
                more = await self.poll_once()
            except Exception as exc:
                failures += 1
                delay = min(self._query_delay * 2 ** (failures - 1), self._max_backoff)
                logger.warning("frontier.poll_failed", error=repr(exc), retry_in=delay)
                await asyncio.sleep(delay)
                continue
            failures = 0
            await asyncio.sleep(0 if more else self._query_delay)


__all__ = ["MaxOrderingSnapshot", "OrderingFrontierTracker"]
