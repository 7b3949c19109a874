"""Unit tests for burst deduplication."""

from __future__ import annotations

from auditrelay.events import dedup_key
from auditrelay.events import Deduplicator
from tests.helpers.fakes import ManualClock


class TestDedupKey:
    def test_absent_parts_are_empty(self):
        assert dedup_key("PAGE_VIEW", None, None) == ("PAGE_VIEW", "", "")

    def test_list_entity_ids_are_joined(self):
        assert dedup_key("USER_DELETE", ["1", "2"], "table") == (
            "USER_DELETE",
            "1,2",
            "table",
        )


class TestDeduplicator:
    def test_repeat_inside_window_is_dropped(self):
        clock = ManualClock()
        dedup = Deduplicator(1.5, clock=clock)
        key = dedup_key("USER_CREATE", "42", None)

        assert dedup.accept(key) is True
        clock.advance(0.5)
        assert dedup.accept(key) is False

    def test_repeat_after_window_is_accepted(self):
        clock = ManualClock()
        dedup = Deduplicator(1.5, clock=clock)
        key = dedup_key("USER_CREATE", "42", None)

        dedup.accept(key)
        clock.advance(1.5)
        assert dedup.accept(key) is True

    def test_dropped_call_does_not_slide_window(self):
        clock = ManualClock()
        dedup = Deduplicator(1.5, clock=clock)
        key = dedup_key("SEARCH", None, "hosts")

        assert dedup.accept(key)
        clock.advance(1.4)
        assert not dedup.accept(key)
        clock.advance(0.2)
        # 1.6s after the accepted call, although only 0.2s after the drop.
        assert dedup.accept(key)

    def test_distinct_keys_do_not_interfere(self):
        dedup = Deduplicator(1.5, clock=ManualClock())
        assert dedup.accept(dedup_key("USER_EDIT", "1", None))
        assert dedup.accept(dedup_key("USER_EDIT", "2", None))
        assert dedup.accept(dedup_key("USER_EDIT", "1", "drawer"))

    def test_at_most_one_per_window_per_key(self):
        clock = ManualClock()
        dedup = Deduplicator(1.5, clock=clock)
        key = dedup_key("ALERT_OPEN", "a-1", None)

        accepted = 0
        for _ in range(20):
            if dedup.accept(key):
                accepted += 1
            clock.advance(0.25)
        # Calls from 0.0s to 4.75s open windows at 0.0, 1.5, 3.0 and 4.5.
        assert accepted == 4

    def test_sweep_runs_only_past_cap(self):
        clock = ManualClock()
        dedup = Deduplicator(1.0, max_keys=3, clock=clock)
        for name in ("a", "b", "c"):
            dedup.accept(dedup_key(name, None, None))
        clock.advance(5.0)
        assert len(dedup) == 3

        dedup.accept(dedup_key("d", None, None))
        assert len(dedup) == 1

    def test_sweep_keeps_recent_keys(self):
        clock = ManualClock()
        dedup = Deduplicator(1.0, max_keys=2, clock=clock)
        dedup.accept(dedup_key("old", None, None))
        clock.advance(3.0)
        dedup.accept(dedup_key("recent", None, None))
        clock.advance(1.0)
        dedup.accept(dedup_key("new", None, None))

        # cutoff = 4.0 - 2.0: "old" (0.0) goes, "recent" (3.0) stays.
        assert len(dedup) == 2
        assert not dedup.accept(dedup_key("new", None, None))
