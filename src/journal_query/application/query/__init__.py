"""Application – journal query engine."""

from journal_query.application.query.event_adapters import EventAdapter, EventAdapters, identity_adapter
from journal_query.application.query.flow_control import FlowControl, TagCursor, next_flow_control
from journal_query.application.query.frontier import MaxOrderingSnapshot, OrderingFrontierTracker
from journal_query.application.query.in_memory import InMemoryJournalStore
from journal_query.application.query.persistence_ids import PersistenceIdTracker
from journal_query.application.query.read_journal import MAX_SEQUENCE_NR, ReadJournal
from journal_query.application.query.records import EventEnvelope, StoredRecord
from journal_query.application.query.serialization import JsonSerializer, Serializer
from journal_query.application.query.store import JournalStore, RecordResult

__all__ = [
    "MAX_SEQUENCE_NR",
    "EventAdapter",
    "EventAdapters",
    "EventEnvelope",
    "FlowControl",
    "InMemoryJournalStore",
    "JournalStore",
    "JsonSerializer",
    "MaxOrderingSnapshot",
    "OrderingFrontierTracker",
    "PersistenceIdTracker",
    "ReadJournal",
    "RecordResult",
    "Serializer",
    "StoredRecord",
    "TagCursor",
    "identity_adapter",
    "next_flow_control",
]
