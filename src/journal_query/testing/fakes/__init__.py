"""Testing fakes – in-memory doubles for kernel ports."""
from journal_query.application.query.in_memory import InMemoryJournalStore
from journal_query.kernel.time import FrozenClock
from journal_query.testing.fakes.clock import FakeClock

__all__ = ["FakeClock", "FrozenClock", "InMemoryJournalStore"]
