"""Storage backends for queue and flag persistence."""

from auditrelay.storage.base import KeyValueStore
from auditrelay.storage.base import MemoryKeyValueStore
from auditrelay.storage.file import FileKeyValueStore
from auditrelay.storage.redis_store import RedisKeyValueStore

__all__ = [
    "FileKeyValueStore",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "RedisKeyValueStore",
]
