"""Unit tests for in-process delivery statistics."""

from __future__ import annotations

from auditrelay.observability import delivery_stats_snapshot
from auditrelay.observability import record_drop
from auditrelay.observability import record_send
from auditrelay.observability import reset_delivery_stats
from auditrelay.observability import SendOutcome


class TestDeliveryStats:
    def test_records_outcomes_and_latency(self):
        record_send(outcome=SendOutcome.delivered, duration_ms=10.0)
        record_send(outcome=SendOutcome.rejected, duration_ms=20.0)
        record_send(outcome=SendOutcome.failed, duration_ms=30.0)
        record_drop(2)

        stats = delivery_stats_snapshot()
        assert stats["sent"] == 3
        assert stats["delivered"] == 1
        assert stats["rejected"] == 1
        assert stats["failed"] == 1
        assert stats["dropped"] == 2
        assert stats["total_ms"] == 60.0
        assert stats["avg_ms"] == 20.0
        assert stats["max_ms"] == 30.0
        assert stats["last_ms"] == 30.0

    def test_negative_durations_are_clamped(self):
        record_send(outcome=SendOutcome.delivered, duration_ms=-5.0)
        assert delivery_stats_snapshot()["total_ms"] == 0.0

    def test_reset_clears_everything(self):
        record_send(outcome=SendOutcome.failed, duration_ms=1.0)
        reset_delivery_stats()
        stats = delivery_stats_snapshot()
        assert stats["sent"] == 0
        assert stats["avg_ms"] == 0.0
