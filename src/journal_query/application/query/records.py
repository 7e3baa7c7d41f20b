"""Application query – StoredRecord and EventEnvelope."""

from __future__ import annotations

import dataclasses
from typing import Any

from journal_query.kernel.types import Offset


@dataclasses.dataclass(frozen=True)
class StoredRecord:
    """A committed journal row, after its payload has been deserialized.

    Never updated or deleted by the query engine.
    """

    persistence_id: str
    """Identifies the writer (aggregate, entity, …) the event belongs to."""

    sequence_nr: int
    """1-based, strictly increasing per ``persistence_id``."""

    ordering: int
    """Globally unique, monotonically assigned at write time; may contain gaps."""

    payload: Any
    """Deserialized event payload."""

    manifest: str = ""
    """Type hint stored alongside the payload, passed to event adapters."""

    tags: frozenset[str] = frozenset()

    def with_payload(self, payload: Any) -> StoredRecord:
        return dataclasses.replace(self, payload=payload)


@dataclasses.dataclass(frozen=True)
class EventEnvelope:
    """A domain event as emitted by a query stream.

    ``offset`` is ``Sequence(sequence_nr)`` for persistence-id queries and
    ``Sequence(ordering)`` for tag queries.
    """

    offset: Offset
    persistence_id: str
    sequence_nr: int
    event: Any


__all__ = ["EventEnvelope", "StoredRecord"]
