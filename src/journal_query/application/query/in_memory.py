"""Application query – InMemoryJournalStore for tests and local development."""

from __future__ import annotations

import dataclasses
from collections.abc import AsyncIterator, Iterable
from typing import Any

from journal_query.application.query.records import StoredRecord
from journal_query.application.query.store import JournalStore, RecordResult
from journal_query.kernel.errors import DeserializationError
from journal_query.kernel.types import Err, Ok


@dataclasses.dataclass
class _Row:
    record: StoredRecord
    corrupt: bool = False


class InMemoryJournalStore(JournalStore):
    """In-memory :class:`JournalStore`.

    Besides :meth:`write`, the store can simulate the situations the
    ordering frontier tracker has to cope with:

    * :meth:`reserve_ordering` hands out an ordering value that is not yet
      visible, as a database sequence does for an in-flight transaction;
      :meth:`commit` makes it visible, :meth:`abort` leaves a permanent gap.
    * :meth:`corrupt` makes a committed row fail deserialization.
    * :attr:`failure` makes every read raise, as a lost connection would.
    """

    def __init__(self) -> None:
        # ordering → row
        self._rows: dict[int, _Row] = {}
        self._next_ordering = 1
        self._reserved: set[int] = set()
        self.failure: Exception | None = None
        self.reads = 0

    # ------------------------------------------------------------------
    # Write side (test helpers)
    # ------------------------------------------------------------------

    def reserve_ordering(self) -> int:
        ordering = self._next_ordering
        self._next_ordering += 1
        self._reserved.add(ordering)
        return ordering

    def commit(
        self,
        ordering: int,
        persistence_id: str,
        sequence_nr: int,
        payload: Any,
        *,
        tags: Iterable[str] = (),
        manifest: str = "",
    ) -> StoredRecord:
        if ordering in self._rows:
            raise ValueError(f"Ordering {ordering} is already committed")
        self._reserved.discard(ordering)
        self._next_ordering = max(self._next_ordering, ordering + 1)
        record = StoredRecord(
            persistence_id=persistence_id,
            sequence_nr=sequence_nr,
            ordering=ordering,
            payload=payload,
            manifest=manifest,
            tags=frozenset(tags),
        )
        self._rows[ordering] = _Row(record)
        return record

    def abort(self, ordering: int) -> None:
        self._reserved.discard(ordering)

    def write(
        self,
        persistence_id: str,
        sequence_nr: int,
        payload: Any,
        *,
        tags: Iterable[str] = (),
        manifest: str = "",
        ordering: int | None = None,
    ) -> StoredRecord:
        """Reserve (or use the explicit *ordering*) and commit in one step."""
        if ordering is None:
            ordering = self.reserve_ordering()
        return self.commit(
            ordering, persistence_id, sequence_nr, payload, tags=tags, manifest=manifest
        )

    def corrupt(self, ordering: int) -> None:
        self._rows[ordering].corrupt = True

    # ------------------------------------------------------------------
    # JournalStore interface
    # ------------------------------------------------------------------

    async def records_for(
        self,
        persistence_id: str,
        from_sequence_nr: int,
        to_sequence_nr: int,
        max_results: int,
    ) -> AsyncIterator[RecordResult]:
        self._check()
        rows = sorted(
            (
                row
                for row in self._rows.values()
                if row.record.persistence_id == persistence_id
                and from_sequence_nr <= row.record.sequence_nr <= to_sequence_nr
            ),
            key=lambda row: row.record.sequence_nr,
        )
        for row in rows[:max_results]:
            yield self._result(row)

    async def records_by_tag(
        self,
        tag: str,
        from_ordering: int,
        to_ordering: int,
        max_results: int,
    ) -> AsyncIterator[RecordResult]:
        self._check()
        orderings = sorted(
            ordering
            for ordering, row in self._rows.items()
            if from_ordering < ordering <= to_ordering and tag in row.record.tags
        )
        for ordering in orderings[:max_results]:
            yield self._result(self._rows[ordering])

    async def all_persistence_ids(self, limit: int | None = None) -> AsyncIterator[str]:
        self._check()
        seen: dict[str, None] = {}
        for ordering in sorted(self._rows):
            seen.setdefault(self._rows[ordering].record.persistence_id, None)
        ids = list(seen)
        for persistence_id in ids if limit is None else ids[:limit]:
            yield persistence_id

    async def max_committed_ordering(self) -> int:
        self._check()
        return max(self._rows, default=0)

    async def ordering_ids(self, after: int, limit: int) -> list[int]:
        self._check()
        return sorted(o for o in self._rows if o > after)[:limit]

    def _check(self) -> None:
        self.reads += 1
        if self.failure is not None:
            raise self.failure

    @staticmethod
    def _result(row: _Row) -> RecordResult:
        if row.corrupt:
            return Err(
                DeserializationError(
                    row.record.persistence_id,
                    row.record.sequence_nr,
                    manifest=row.record.manifest,
                )
            )
        return Ok(row.record)


__all__ = ["InMemoryJournalStore"]
