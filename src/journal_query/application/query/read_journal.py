"""Application query – ReadJournal.

Six stream operations over a :class:`JournalStore`:

=====================================  ===============================
bounded ("current")                    live
=====================================  ===============================
``current_events_by_persistence_id``   ``events_by_persistence_id``
``current_persistence_ids``            ``persistence_ids``
``current_events_by_tag``              ``events_by_tag``
=====================================  ===============================

Every operation is an async generator. Each consumer owns its cursor; the
engine persists nothing, so a stream is resumed by calling the operation
again with the last offset (tag queries) or ``last sequence_nr + 1``
(persistence-id queries). Delivery is at-least-once. Cancel a stream by
cancelling the consuming task or calling ``aclose()`` on it; no store read
is issued afterwards.

Example::

    async with ReadJournal(store, ReadJournalSettings()) as journal:
        async for envelope in journal.events_by_tag("payment", offset=last_seen):
            await project(envelope)
"""

from __future__ import annotations

import asyncio
import contextlib
import sys
from collections.abc import AsyncIterator
from typing import Any

from journal_query.application.query.event_adapters import EventAdapters
from journal_query.application.query.flow_control import FlowControl, TagCursor, next_flow_control
from journal_query.application.query.frontier import MaxOrderingSnapshot, OrderingFrontierTracker
from journal_query.application.query.persistence_ids import PersistenceIdTracker
from journal_query.application.query.records import EventEnvelope, StoredRecord
from journal_query.application.query.store import JournalStore, RecordResult
from journal_query.config.settings import ReadJournalSettings
from journal_query.kernel.errors import FrontierTimeoutError
from journal_query.kernel.time import Clock
from journal_query.kernel.types import Offset, Sequence, to_offset
from journal_query.observability.logging import get_logger

logger = get_logger(__name__)

MAX_SEQUENCE_NR = sys.maxsize


class ReadJournal:
    """Query engine turning the journal into resumable, live-updating streams.

    Parameters
    ----------
    store:
        Backing journal.
    settings:
        Page size, delays and frontier tracker tuning.
    adapters:
        Payload-type → adapter registry applied to every record.
    frontier_tracker:
        Shared tracker; built from *settings* when omitted. It is started
        lazily by the first tag query and stopped by :meth:`close`.
    clock:
        Time source for the tracker built from *settings*.
    """

    def __init__(
        self,
        store: JournalStore,
        settings: ReadJournalSettings | None = None,
        *,
        adapters: EventAdapters | None = None,
        frontier_tracker: OrderingFrontierTracker | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._store = store
        self._settings = settings or ReadJournalSettings()
        self._adapters = adapters or EventAdapters()
        self._tracker = frontier_tracker or OrderingFrontierTracker.from_settings(
            store, self._settings, clock=clock
        )

    @property
    def settings(self) -> ReadJournalSettings:
        return self._settings

    @property
    def frontier_tracker(self) -> OrderingFrontierTracker:
        return self._tracker

    async def close(self) -> None:
        await self._tracker.stop()

    async def __aenter__(self) -> ReadJournal:
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Persistence ids
    # ------------------------------------------------------------------

    async def current_persistence_ids(self) -> AsyncIterator[str]:
        """All persistence ids known right now; completes after one scan."""
        async with contextlib.aclosing(self._store.all_persistence_ids()) as ids:
            async for persistence_id in ids:
                yield persistence_id

    async def persistence_ids(self) -> AsyncIterator[str]:
        """Every persistence id once, then new ones as they appear. Never completes."""
        tracker = PersistenceIdTracker()
        while True:
            scan = [pid async for pid in self.current_persistence_ids()]
            for persistence_id in tracker.diff(scan):
                yield persistence_id
            await asyncio.sleep(self._settings.refresh_interval)

    # ------------------------------------------------------------------
    # Events by persistence id
    # ------------------------------------------------------------------

    async def current_events_by_persistence_id(
        self,
        persistence_id: str,
        from_sequence_nr: int = 0,
        to_sequence_nr: int = MAX_SEQUENCE_NR,
    ) -> AsyncIterator[EventEnvelope]:
        """Events of *persistence_id* in ``[from, to]`` as stored now, then complete."""
        page_size = self._settings.max_buffer_size
        from_sequence_nr = max(1, from_sequence_nr)
        while from_sequence_nr <= to_sequence_nr:
            records = await self._collect(
                self._store.records_for(persistence_id, from_sequence_nr, to_sequence_nr, page_size)
            )
            for envelope in self._persistence_id_envelopes(records):
                yield envelope
            if len(records) < page_size:
                return
            from_sequence_nr = records[-1].sequence_nr + 1

    async def events_by_persistence_id(
        self,
        persistence_id: str,
        from_sequence_nr: int = 0,
        to_sequence_nr: int = MAX_SEQUENCE_NR,
    ) -> AsyncIterator[EventEnvelope]:
        """Like :meth:`current_events_by_persistence_id`, then keeps polling.

        Completes once an event with ``sequence_nr >= to_sequence_nr`` has
        been emitted; empty polls only wait ``refresh_interval`` and retry.
        """
        logger.debug("query.events_by_persistence_id", persistence_id=persistence_id, from_sequence_nr=from_sequence_nr)
        next_sequence_nr = max(1, from_sequence_nr)
        first = True
        while next_sequence_nr <= to_sequence_nr:
            if not first:
                await asyncio.sleep(self._settings.refresh_interval)
            first = False
            records = await self._collect(
                self._store.records_for(
                    persistence_id,
                    next_sequence_nr,
                    to_sequence_nr,
                    self._settings.max_buffer_size,
                )
            )
            for envelope in self._persistence_id_envelopes(records):
                yield envelope
            if records:
                next_sequence_nr = max(r.sequence_nr for r in records) + 1

    # ------------------------------------------------------------------
    # Events by tag
    # ------------------------------------------------------------------

    async def current_events_by_tag(
        self,
        tag: str,
        offset: int | Offset | None = None,
    ) -> AsyncIterator[EventEnvelope]:
        """Events tagged *tag* after *offset* that existed when the query began.

        The last batch is returned whole, so offsets beyond the target may
        appear before the stream completes.
        """
        target = await self._store.max_committed_ordering()
        async for envelope in self._events_by_tag(tag, to_offset(offset).value, target):
            yield envelope

    async def events_by_tag(
        self,
        tag: str,
        offset: int | Offset | None = None,
    ) -> AsyncIterator[EventEnvelope]:
        """Events tagged *tag* after *offset*, then new ones as they settle. Never completes."""
        async for envelope in self._events_by_tag(tag, to_offset(offset).value, None):
            yield envelope

    async def _events_by_tag(
        self,
        tag: str,
        offset: int,
        target: int | None,
    ) -> AsyncIterator[EventEnvelope]:
        logger.debug("query.events_by_tag", tag=tag, offset=offset, target=target)
        await self._tracker.start()
        batch_size = self._settings.max_buffer_size
        cursor = TagCursor(offset, FlowControl.CONTINUE)
        while cursor.control is not FlowControl.STOP:
            if cursor.control is FlowControl.CONTINUE_DELAYED:
                await asyncio.sleep(self._settings.refresh_interval)
            try:
                frontier = await self._tracker.current_frontier(self._settings.ask_timeout)
            except FrontierTimeoutError as exc:
                logger.info("query.frontier_unavailable", tag=tag, offset=cursor.offset, timeout=exc.timeout)
                cursor = TagCursor(cursor.offset, FlowControl.CONTINUE_DELAYED)
                continue
            records = await self._tag_batch(tag, cursor.offset, batch_size, frontier)
            cursor = next_flow_control(
                cursor, [r.ordering for r in records], batch_size, target, frontier
            )
            for record in records:
                for adapted in self._adapters.adapt(record):
                    yield EventEnvelope(
                        Sequence(record.ordering),
                        adapted.persistence_id,
                        adapted.sequence_nr,
                        adapted.payload,
                    )

    async def _tag_batch(
        self,
        tag: str,
        offset: int,
        batch_size: int,
        frontier: MaxOrderingSnapshot,
    ) -> list[StoredRecord]:
        # Nothing at or below the frontier is new: leave unsettled orderings alone.
        if frontier.max_ordering < offset:
            return []
        return await self._collect(
            self._store.records_by_tag(tag, offset, frontier.max_ordering, batch_size)
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    async def _collect(results: AsyncIterator[RecordResult]) -> list[StoredRecord]:
        """Drain one store read, failing on the first undecodable record."""
        records: list[StoredRecord] = []
        async with contextlib.aclosing(results) as rows:
            async for result in rows:
                records.append(result.unwrap())
        return records

    def _persistence_id_envelopes(self, records: list[StoredRecord]) -> list[EventEnvelope]:
        return [
            EventEnvelope(
                Sequence(adapted.sequence_nr),
                adapted.persistence_id,
                adapted.sequence_nr,
                adapted.payload,
            )
            for record in records
            for adapted in self._adapters.adapt(record)
        ]


__all__ = ["MAX_SEQUENCE_NR", "ReadJournal"]
