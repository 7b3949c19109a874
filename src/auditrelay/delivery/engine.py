"""Delivery of queued audit events to the collector.

Two independent paths share the queue:

* ``eager_send`` makes one attempt right after an event is queued and
  removes the entry on success.  Failures are left for the next flush.
* ``flush`` drains a snapshot of the queue sequentially, incrementing
  ``attempts`` on failure and dropping entries that reach the ceiling.

Both may deliver the same entry; the contract is at-least-once.
"""

from __future__ import annotations

import asyncio
import logging
from time import perf_counter

from auditrelay.config import DeliveryConfig
from auditrelay.delivery.sender import HttpSender
from auditrelay.delivery.sender import is_delivered
from auditrelay.delivery.sender import TransportError
from auditrelay.observability import record_drop
from auditrelay.observability import record_send
from auditrelay.observability import SendOutcome
from auditrelay.queue import DurableQueue
from auditrelay.queue import QueueEntry

logger = logging.getLogger(__name__)


class DeliveryEngine:
    """Sends queue entries and keeps the retry bookkeeping."""

    def __init__(
        self,
        queue: DurableQueue,
        sender: HttpSender,
        config: DeliveryConfig | None = None,
    ) -> None:
        self.config = config or DeliveryConfig()
        self._queue = queue
        self._sender = sender
        self._flushing = False

    @property
    def flushing(self) -> bool:
        return self._flushing

    # ------------------------------------------------------------------
    # Single attempt
    # ------------------------------------------------------------------

    async def send(self, entry: QueueEntry) -> bool:
        """Make one delivery attempt; ``True`` means the entry is resolved.

        The request timeout is enforced by cancelling the send.  Network
        errors, timeouts and 5xx responses return ``False``.
        """
        start = perf_counter()
        outcome = SendOutcome.failed
        try:
            status = await asyncio.wait_for(
                self._sender.post(
                    entry.payload.to_wire(),
                    event_id=entry.id,
                    timeout_seconds=self.config.request_timeout_seconds,
                ),
                timeout=self.config.request_timeout_seconds,
            )
        except TimeoutError:
            logger.info("Audit event %s timed out", entry.id)
        except TransportError as exc:
            logger.info("Audit event %s not delivered: %s", entry.id, exc)
        except Exception:
            logger.exception("Audit sender raised unexpectedly for %s", entry.id)
        else:
            if not is_delivered(status):
                logger.info("Audit collector returned %d for %s", status, entry.id)
            elif status >= 400:
                outcome = SendOutcome.rejected
                logger.warning(
                    "Audit collector rejected %s with %d; not retrying",
                    entry.id,
                    status,
                )
            else:
                outcome = SendOutcome.delivered
        finally:
            record_send(outcome=outcome, duration_ms=(perf_counter() - start) * 1000)
        return outcome is not SendOutcome.failed

    # ------------------------------------------------------------------
    # Eager path
    # ------------------------------------------------------------------

    async def eager_send(self, entry: QueueEntry) -> bool:
        """Try *entry* once; on success drop it from the queue and persist."""
        if not await self.send(entry):
            return False
        if self._queue.remove(entry.id):
            await self._queue.persist()
        return True

    # ------------------------------------------------------------------
    # Batch path
    # ------------------------------------------------------------------

    async def flush(self) -> None:
        """Drain a snapshot of the queue once.

        A call made while another flush runs returns immediately.
        """
        if self._flushing or len(self._queue) == 0:
            return
        self._flushing = True
        try:
            batch = self._queue.snapshot()
            survivors: list[QueueEntry] = []
            dropped = 0

            for entry in batch:
                if await self.send(entry):
                    continue
                entry.attempts += 1
                if entry.attempts < self.config.max_retries:
                    survivors.append(entry)
                else:
                    dropped += 1
                    logger.warning(
                        "Dropping audit event %s (%s) after %d attempts",
                        entry.id,
                        entry.payload.details.action,
                        entry.attempts,
                    )

            # Entries removed meanwhile were delivered eagerly; entries
            # added meanwhile go after the survivors.
            live = self._queue.snapshot()
            live_ids = {e.id for e in live}
            batch_ids = {e.id for e in batch}
            kept = [e for e in survivors if e.id in live_ids]
            added = [e for e in live if e.id not in batch_ids]
            self._queue.replace([*kept, *added])

            if dropped:
                record_drop(dropped)
            logger.debug(
                "audit_flush batch=%d delivered=%d retained=%d dropped=%d",
                len(batch),
                len(batch) - len(survivors) - dropped,
                len(kept),
                dropped,
            )
            await self._queue.persist()
        finally:
            self._flushing = False
