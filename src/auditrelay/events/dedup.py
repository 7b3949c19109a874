"""Burst suppression for repeated identical events."""

from __future__ import annotations

import time
from collections.abc import Callable
from collections.abc import Sequence

DedupKey = tuple[str, str, str]


def dedup_key(
    action: str,
    entity_id: str | Sequence[str] | None,
    section: str | None,
) -> DedupKey:
    """Build the ``(action, entity_id, section)`` key; absent parts are ``""``."""
    if entity_id is None:
        entity = ""
    elif isinstance(entity_id, str):
        entity = entity_id
    else:
        entity = ",".join(entity_id)
    return (action, entity, section or "")


class Deduplicator:
    """Drops events whose key was accepted less than one window ago.

    Only accepted calls move a key's timestamp forward.  Once the index
    grows past ``max_keys``, entries older than twice the window are
    swept in a single pass.
    """

    def __init__(
        self,
        window_seconds: float = 1.5,
        *,
        max_keys: int = 200,
        clock: Callable[[], float] | None = None,
    ) -> None:
        if window_seconds < 0:
            raise ValueError("window_seconds must be >= 0")
        self._window = window_seconds
        self._max_keys = max_keys
        self._clock = clock or time.monotonic
        self._last_accepted: dict[DedupKey, float] = {}

    def accept(self, key: DedupKey) -> bool:
        """Return ``True`` and record *key* unless it is inside the window."""
        now = self._clock()
        last = self._last_accepted.get(key)
        if last is not None and now - last < self._window:
            return False

        self._last_accepted[key] = now
        if len(self._last_accepted) > self._max_keys:
            self._sweep(now)
        return True

    def __len__(self) -> int:
        return len(self._last_accepted)

    def clear(self) -> None:
        self._last_accepted.clear()

    def _sweep(self, now: float) -> None:
        cutoff = now - self._window * 2
        stale = [k for k, ts in self._last_accepted.items() if ts < cutoff]
        for key in stale:
            del self._last_accepted[key]
