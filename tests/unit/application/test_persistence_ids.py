"""Unit tests for PersistenceIdTracker."""

from __future__ import annotations

from journal_query.application.query import PersistenceIdTracker


class TestPersistenceIdTracker:
    def test_first_scan_returns_everything(self) -> None:
        tracker = PersistenceIdTracker()
        assert tracker.diff(["A", "B"]) == ["A", "B"]

    def test_later_scan_returns_only_new_ids(self) -> None:
        tracker = PersistenceIdTracker()
        tracker.diff(["A", "B"])
        assert tracker.diff(["A", "B", "C"]) == ["C"]
        assert tracker.diff(["A", "B", "C"]) == []

    def test_duplicates_within_a_scan_emitted_once(self) -> None:
        tracker = PersistenceIdTracker()
        assert tracker.diff(["A", "A", "B"]) == ["A", "B"]

    def test_preserves_scan_order(self) -> None:
        tracker = PersistenceIdTracker()
        assert tracker.diff(["c", "a", "b"]) == ["c", "a", "b"]

    def test_membership_and_size(self) -> None:
        tracker = PersistenceIdTracker()
        tracker.diff(["A", "B"])
        assert "A" in tracker
        assert "Z" not in tracker
        assert len(tracker) == 2

    def test_trackers_do_not_share_state(self) -> None:
        first, second = PersistenceIdTracker(), PersistenceIdTracker()
        first.diff(["A"])
        assert second.diff(["A"]) == ["A"]
