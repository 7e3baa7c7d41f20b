"""Application query – JournalStore port."""

from __future__ import annotations

import abc
from collections.abc import AsyncIterator

from journal_query.application.query.records import StoredRecord
from journal_query.kernel.errors import DeserializationError
from journal_query.kernel.types import Result

type RecordResult = Result[StoredRecord, DeserializationError]


class JournalStore(abc.ABC):
    """Port: read-only access to the append-only journal.

    Implementations must tolerate many concurrent independent readers.
    A record whose payload cannot be decoded is yielded as
    ``Err(DeserializationError)`` instead of ending the iteration; connection
    failures are raised.
    """

    @abc.abstractmethod
    def records_for(
        self,
        persistence_id: str,
        from_sequence_nr: int,
        to_sequence_nr: int,
        max_results: int,
    ) -> AsyncIterator[RecordResult]:
        """Yield records of *persistence_id* with ``from <= sequence_nr <= to``.

        Ascending by sequence number, at most *max_results* items.
        """

    @abc.abstractmethod
    def records_by_tag(
        self,
        tag: str,
        from_ordering: int,
        to_ordering: int,
        max_results: int,
    ) -> AsyncIterator[RecordResult]:
        """Yield records tagged *tag* with ``from < ordering <= to``.

        Ascending by ordering, at most *max_results* items.
        """

    @abc.abstractmethod
    def all_persistence_ids(self, limit: int | None = None) -> AsyncIterator[str]:
        """Yield every distinct persistence id currently in the journal."""

    @abc.abstractmethod
    async def max_committed_ordering(self) -> int:
        """Return the highest committed ordering value (``0`` when empty).

        Not necessarily gap-free below.
        """

    @abc.abstractmethod
    async def ordering_ids(self, after: int, limit: int) -> list[int]:
        """Return committed ordering values ``> after``, ascending, at most *limit*."""


__all__ = ["JournalStore", "RecordResult"]
