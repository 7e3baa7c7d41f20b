"""Kernel time – Clock port + implementations."""
from journal_query.kernel.time.clock import Clock, FrozenClock, SystemClock

__all__ = ["Clock", "FrozenClock", "SystemClock"]
