"""In-process delivery counters and send latency aggregates."""

from __future__ import annotations

import logging
from dataclasses import asdict
from dataclasses import dataclass
from enum import Enum
from threading import Lock

logger = logging.getLogger(__name__)


class SendOutcome(str, Enum):
    """How a single delivery attempt ended."""

    delivered = "delivered"
    rejected = "rejected"
    failed = "failed"


@dataclass
class DeliveryStats:
    """Aggregated delivery metrics for one process."""

    sent: int = 0
    delivered: int = 0
    rejected: int = 0
    failed: int = 0
    dropped: int = 0
    total_ms: float = 0.0
    max_ms: float = 0.0
    last_ms: float = 0.0


class _StatsRecorder:
    def __init__(self) -> None:
        self._lock = Lock()
        self._stats = DeliveryStats()

    def record_send(self, *, outcome: SendOutcome, duration_ms: float) -> None:
        normalized = max(float(duration_ms), 0.0)
        with self._lock:
            stats = self._stats
            stats.sent += 1
            if outcome is SendOutcome.delivered:
                stats.delivered += 1
            elif outcome is SendOutcome.rejected:
                stats.rejected += 1
            else:
                stats.failed += 1
            stats.total_ms += normalized
            stats.last_ms = normalized
            stats.max_ms = max(stats.max_ms, normalized)

        logger.debug(
            "audit_send outcome=%s duration_ms=%.3f",
            outcome.value,
            normalized,
        )

    def record_drop(self, count: int = 1) -> None:
        with self._lock:
            self._stats.dropped += count

    def snapshot(self) -> dict[str, float | int]:
        with self._lock:
            data = asdict(self._stats)
            sent = self._stats.sent
        data["avg_ms"] = round(data["total_ms"] / sent if sent else 0.0, 3)
        for key in ("total_ms", "max_ms", "last_ms"):
            data[key] = round(data[key], 3)
        return data

    def reset(self) -> None:
        with self._lock:
            self._stats = DeliveryStats()


_RECORDER = _StatsRecorder()


def record_send(*, outcome: SendOutcome, duration_ms: float) -> None:
    """Record one delivery attempt."""
    _RECORDER.record_send(outcome=outcome, duration_ms=duration_ms)


def record_drop(count: int = 1) -> None:
    """Record entries discarded after exhausting their retries."""
    _RECORDER.record_drop(count)


def delivery_stats_snapshot() -> dict[str, float | int]:
    """Return current in-process delivery aggregates."""
    return _RECORDER.snapshot()


def reset_delivery_stats() -> None:
    """Clear all delivery aggregates (test helper)."""
    _RECORDER.reset()
