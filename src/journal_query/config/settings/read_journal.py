"""Config settings – ReadJournalSettings."""
from __future__ import annotations

import dataclasses
from typing import ClassVar

from journal_query.config.settings.base import Settings
from journal_query.config.validation import InvalidSettingValueError


@dataclasses.dataclass
class ReadJournalSettings(Settings):
    """Tuning knobs for the read journal and its ordering frontier tracker.

    All durations are in seconds.

    ``gap_give_up`` is the single policy knob that decides when a missing
    ordering value is treated as permanently vacant. While a hole is younger
    than this, tag streams wait for it, so slow commits make events appear
    late but never lost or duplicated. A write that commits later than
    ``gap_give_up`` after its ordering was assigned is still returned by
    persistence-id queries, but a tag stream whose cursor has already passed
    that offset misses the event. Keep it comfortably above the worst
    expected commit latency.
    """

    _prefix: ClassVar[str] = "READ_JOURNAL"

    max_buffer_size: int = 500
    refresh_interval: float = 1.0
    query_delay: float = 1.0
    max_backoff_query_delay: float = 60.0
    ask_timeout: float = 1.0
    journal_sequence_batch_size: int = 10000
    gap_give_up: float = 10.0
    database_url: str = ""

    def _validate(self) -> None:
        for name in ("max_buffer_size", "journal_sequence_batch_size"):
            value = getattr(self, name)
            if value <= 0:
                raise InvalidSettingValueError(name, value, "must be greater than zero")
        for name in ("refresh_interval", "query_delay", "ask_timeout"):
            value = getattr(self, name)
            if value <= 0:
                raise InvalidSettingValueError(name, value, "must be a positive duration")
        if self.gap_give_up < 0:
            raise InvalidSettingValueError("gap_give_up", self.gap_give_up, "must not be negative")
        if self.max_backoff_query_delay < self.query_delay:
            raise InvalidSettingValueError(
                "max_backoff_query_delay",
                self.max_backoff_query_delay,
                "must be at least query_delay",
            )


__all__ = ["ReadJournalSettings"]
