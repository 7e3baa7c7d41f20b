"""Unit tests for kernel time utilities."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from journal_query.kernel.time import FrozenClock, SystemClock
from journal_query.testing.fakes import FakeClock


class TestSystemClock:
    def test_now_returns_utc_aware_datetime(self) -> None:
        result = SystemClock().now()
        assert isinstance(result, datetime)
        assert result.utcoffset() == timedelta(0)

    def test_close_to_wall_clock(self) -> None:
        assert abs((SystemClock().now() - datetime.now(UTC)).total_seconds()) < 1.0


class TestFrozenClock:
    def test_now_is_fixed(self) -> None:
        fixed = datetime(2024, 6, 15, 12, 0, tzinfo=UTC)
        clk = FrozenClock(fixed)
        assert clk.now() == fixed
        assert clk.now() == fixed

    def test_advance(self) -> None:
        clk = FrozenClock(datetime(2024, 6, 15, 12, 0, tzinfo=UTC))
        clk.advance(seconds=30)
        assert clk.now() == datetime(2024, 6, 15, 12, 0, 30, tzinfo=UTC)

    def test_fake_clock_is_pinned(self) -> None:
        assert FakeClock().now() == datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


class TestPublicSurface:
    def test_exports_only_clock_types(self) -> None:
        import journal_query.kernel.time as time_module

        assert sorted(time_module.__all__) == ["Clock", "FrozenClock", "SystemClock"]
        assert not hasattr(time_module, "utc_now")
