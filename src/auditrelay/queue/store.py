"""In-memory delivery queue mirrored to a key-value store.

The in-memory list is authoritative for the running process.  The
persisted copy holds the oldest ``max_persisted`` entries as one JSON
array and exists only so a restart can pick up the previous backlog.
The first write of a process loads that backlog before overwriting it,
so entries queued before ``restore()`` never clobber it.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from collections.abc import Iterator

from pydantic import TypeAdapter
from pydantic import ValidationError

from auditrelay.config import QueueConfig
from auditrelay.queue.schemas import QueueEntry
from auditrelay.storage import KeyValueStore

logger = logging.getLogger(__name__)

_ENTRIES = TypeAdapter(list[QueueEntry])


class DurableQueue:
    """Ordered queue of undelivered entries; insertion order is send order."""

    def __init__(
        self,
        store: KeyValueStore,
        config: QueueConfig | None = None,
    ) -> None:
        self.config = config or QueueConfig()
        self._store = store
        self._entries: list[QueueEntry] = []
        self._persist_lock = asyncio.Lock()
        self._loaded = False

    # ------------------------------------------------------------------
    # In-memory operations
    # ------------------------------------------------------------------

    def enqueue(self, entry: QueueEntry) -> None:
        """Append *entry* at the back of the queue."""
        self._entries.append(entry)

    def remove(self, entry_id: str) -> bool:
        """Drop the entry with *entry_id*; return whether one was present."""
        before = len(self._entries)
        self._entries = [e for e in self._entries if e.id != entry_id]
        return len(self._entries) != before

    def replace(self, entries: Iterable[QueueEntry]) -> None:
        """Swap the whole queue for *entries*."""
        self._entries = list(entries)

    def snapshot(self) -> list[QueueEntry]:
        """Return a shallow copy of the current entries."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[QueueEntry]:
        return iter(list(self._entries))

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    async def persist(self) -> bool:
        """Write the oldest entries to the store; return ``False`` on failure.

        Failures (quota, unavailable backend) are logged and swallowed.
        The snapshot is taken once the write lock is held, so the last
        write to finish reflects the latest queue state.  If ``restore()``
        has not run yet, the stored backlog is merged in first.
        """
        async with self._persist_lock:
            if not self._loaded:
                await self._load()
            head = self._entries[: self.config.max_persisted]
            try:
                raw = _ENTRIES.dump_json(head, by_alias=True).decode()
                await self._store.set(self.config.storage_key, raw)
            except Exception:
                logger.debug("Audit queue persist failed", exc_info=True)
                return False
        return True

    async def restore(self) -> int:
        """Load the persisted backlog ahead of any entries already queued.

        Entries come back verbatim, attempt counts included.  Missing,
        corrupt or unreadable data leaves the queue as it was.  Returns
        the number of restored entries.
        """
        async with self._persist_lock:
            return await self._load()

    async def _load(self) -> int:
        self._loaded = True
        try:
            raw = await self._store.get(self.config.storage_key)
        except Exception:
            logger.debug("Audit queue restore could not read storage", exc_info=True)
            return 0
        if not raw:
            return 0

        try:
            restored = _ENTRIES.validate_json(raw)
        except ValidationError:
            logger.warning("Discarding unreadable persisted audit queue")
            return 0

        restored_ids = {entry.id for entry in restored}
        pending = [e for e in self._entries if e.id not in restored_ids]
        self._entries = [*restored, *pending]
        logger.info("Restored %d audit events from storage", len(restored))
        return len(restored)
