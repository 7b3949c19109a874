"""Queue domain: durable, ordered backlog of undelivered events."""

from auditrelay.queue.schemas import new_entry_id
from auditrelay.queue.schemas import QueueEntry
from auditrelay.queue.store import DurableQueue

__all__ = ["DurableQueue", "QueueEntry", "new_entry_id"]
