"""Application query – PersistenceIdTracker."""

from __future__ import annotations

from collections.abc import Iterable


class PersistenceIdTracker:
    """Turns repeated full scans of persistence ids into a feed of new ids.

    Each live ``persistence_ids()`` stream owns one tracker; the set of known
    ids only grows and is dropped with the stream.
    """

    def __init__(self) -> None:
        self._known: set[str] = set()

    def diff(self, scan: Iterable[str]) -> list[str]:
        """Return ids of *scan* not seen before (in scan order) and remember them."""
        new: list[str] = []
        for persistence_id in scan:
            if persistence_id not in self._known:
                self._known.add(persistence_id)
                new.append(persistence_id)
        return new

    def __contains__(self, persistence_id: object) -> bool:
        return persistence_id in self._known

    def __len__(self) -> int:
        return len(self._known)


__all__ = ["PersistenceIdTracker"]
