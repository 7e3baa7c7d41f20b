"""Application query – EventAdapter registry.

An adapter turns one stored payload into zero or more domain payloads
(upcasting, splitting, or dropping obsolete events). Adapters are selected
by the payload's runtime type; payload types without an adapter pass
through unchanged.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from journal_query.application.query.records import StoredRecord

type EventAdapter = Callable[[Any, str], Iterable[Any]]
"""``adapter(payload, manifest) -> payloads``."""


def identity_adapter(payload: Any, manifest: str) -> list[Any]:  # noqa: ARG001
    return [payload]


class EventAdapters:
    """Registry mapping payload types to adapters.

    Lookup walks the payload type's MRO so an adapter registered for a base
    class also covers its subclasses; the first match is cached per type.

    Example::

        adapters = EventAdapters()
        adapters.register(LegacyDeposit, lambda p, m: [Deposit(amount=p.cents / 100)])
        adapters.adapt(record)  # -> [record.with_payload(Deposit(...))]
    """

    def __init__(self, registrations: dict[type, EventAdapter] | None = None) -> None:
        self._adapters: dict[type, EventAdapter] = dict(registrations or {})
        self._resolved: dict[type, EventAdapter] = {}

    def register(self, payload_type: type, adapter: EventAdapter) -> None:
        self._adapters[payload_type] = adapter
        self._resolved.clear()

    def adapter_for(self, payload_type: type) -> EventAdapter:
        adapter = self._resolved.get(payload_type)
        if adapter is None:
            adapter = next(
                (self._adapters[cls] for cls in payload_type.__mro__ if cls in self._adapters),
                identity_adapter,
            )
            self._resolved[payload_type] = adapter
        return adapter

    def adapt(self, record: StoredRecord) -> list[StoredRecord]:
        """Return one record per adapted payload, keeping ids and ordering."""
        adapter = self.adapter_for(type(record.payload))
        return [record.with_payload(p) for p in adapter(record.payload, record.manifest)]


__all__ = ["EventAdapter", "EventAdapters", "identity_adapter"]
