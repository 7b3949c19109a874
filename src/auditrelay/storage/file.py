"""JSON-file key-value store with async I/O."""

from __future__ import annotations

import asyncio
import json
import logging
import os
from functools import partial
from pathlib import Path

logger = logging.getLogger(__name__)


class FileKeyValueStore:
    """All keys live in one JSON object on disk.

    Uses ``asyncio.to_thread`` for file operations to avoid blocking
    the event loop, guarded by an ``asyncio.Lock`` for serialization.
    Writes go to a sibling temp file first and are swapped in with
    ``os.replace``.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> str | None:
        async with self._lock:
            data = await asyncio.to_thread(self._load, self.path)
        value = data.get(key)
        return value if isinstance(value, str) else None

    async def set(self, key: str, value: str) -> None:
        async with self._lock:
            await asyncio.to_thread(partial(self._update, self.path, key, value))

    @staticmethod
    def _load(path: Path) -> dict[str, object]:
        if not path.exists():
            return {}
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{path} does not hold a JSON object")
        return data

    @classmethod
    def _update(cls, path: Path, key: str, value: str) -> None:
        try:
            data = cls._load(path)
        except ValueError:
            logger.warning("Replacing unreadable key-value file %s", path)
            data = {}
        data[key] = value
        tmp = path.with_name(path.name + ".tmp")
        tmp.write_text(json.dumps(data), encoding="utf-8")
        os.replace(tmp, path)
