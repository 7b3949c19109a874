"""Key-value storage interface and the in-memory implementation."""

from __future__ import annotations

from typing import Protocol
from typing import runtime_checkable


@runtime_checkable
class KeyValueStore(Protocol):
    """Minimal async string store used for queue and flag persistence.

    Implementations may raise on I/O failure; callers decide whether
    that matters.
    """

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...


class MemoryKeyValueStore:
    """Dict-backed store for tests and hosts without durable storage."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value
