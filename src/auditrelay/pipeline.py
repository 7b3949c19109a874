"""Audit pipeline: the process-level owner of queue, delivery and lifecycle.

``AuditPipeline.log`` is the single entrypoint for the host application.
It is synchronous, never raises and never waits on I/O: persistence and
the eager send run as background tasks on the running event loop, and
their outcome only shows up in queue state.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import ValidationError

from auditrelay.config import AuditConfig
from auditrelay.connectivity import AlwaysOnline
from auditrelay.connectivity import ConnectivityObserver
from auditrelay.connectivity import Unsubscribe
from auditrelay.delivery import DeliveryEngine
from auditrelay.delivery import HttpSender
from auditrelay.delivery import UrllibHttpSender
from auditrelay.events import AuditAction
from auditrelay.events import AuditDetails
from auditrelay.events import build_envelope
from auditrelay.events import coerce_details
from auditrelay.events import dedup_key
from auditrelay.events import Deduplicator
from auditrelay.events import IdentityContext
from auditrelay.queue import DurableQueue
from auditrelay.queue import QueueEntry
from auditrelay.storage import KeyValueStore
from auditrelay.storage import MemoryKeyValueStore

logger = logging.getLogger(__name__)

Details = AuditDetails | Mapping[str, Any] | None


class AuditPipeline:
    """Captures audit events and delivers them at least once.

    Collaborators are injected so tests can run isolated instances with
    in-memory fakes: *store* backs the queue and the enabled flag,
    *sender* talks to the collector, *connectivity* reports online state.
    """

    def __init__(
        self,
        *,
        config: AuditConfig | None = None,
        store: KeyValueStore | None = None,
        sender: HttpSender | None = None,
        connectivity: ConnectivityObserver | None = None,
        deduplicator: Deduplicator | None = None,
        route: str = "/",
    ) -> None:
        self.config = config or AuditConfig()
        self._store = store or MemoryKeyValueStore()
        self.queue = DurableQueue(self._store, self.config.queue)
        self.engine = DeliveryEngine(
            self.queue,
            sender or UrllibHttpSender(self.config.delivery.endpoint_url),
            self.config.delivery,
        )
        self._connectivity = connectivity or AlwaysOnline()
        self._dedup = deduplicator or Deduplicator(
            self.config.dedup.window_seconds,
            max_keys=self.config.dedup.max_keys,
        )
        self._enabled = True
        self._enabled_unsaved = False
        self._identity: IdentityContext | None = None
        self._route = route
        self._started = False
        self._timer_task: asyncio.Task[None] | None = None
        self._unsubscribe: Unsubscribe | None = None
        self._tasks: set[asyncio.Task[Any]] = set()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def init(self) -> None:
        """Load the enabled flag, restore the backlog, start timer and listener.

        A flag set before ``init()`` wins over the stored one and is
        written back.  Calling again while started does nothing.
        """
        if self._started:
            return
        self._started = True

        if self._enabled_unsaved:
            await self._save_enabled(self._enabled)
        else:
            await self._load_enabled()
        await self.queue.restore()
        self._timer_task = asyncio.create_task(
            self._run_timer(), name="auditrelay-flush-timer"
        )
        self._unsubscribe = self._connectivity.subscribe(self._on_connectivity_change)
        logger.info(
            "Audit pipeline started (enabled=%s, backlog=%d)",
            self._enabled,
            len(self.queue),
        )

    async def shutdown(self) -> None:
        """Stop the timer and listener, then persist once.

        No final flush is attempted.  Pending background tasks are
        cancelled; for a send already handed to the transport only the
        asyncio wrapper is cancelled, the worker thread runs until its
        own request timeout.  An enabled flag that was never written is
        saved here.
        """
        if self._timer_task is not None:
            self._timer_task.cancel()
            await asyncio.gather(self._timer_task, return_exceptions=True)
            self._timer_task = None
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

        pending = list(self._tasks)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        if self._enabled_unsaved:
            await self._save_enabled(self._enabled)
        await self.queue.persist()
        self._started = False
        logger.info("Audit pipeline stopped (backlog=%d)", len(self.queue))

    async def __aenter__(self) -> AuditPipeline:
        await self.init()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.shutdown()

    @property
    def running(self) -> bool:
        return self._timer_task is not None and not self._timer_task.done()

    # ------------------------------------------------------------------
    # Entrypoint
    # ------------------------------------------------------------------

    def log(self, action: str | AuditAction, details: Details = None) -> None:
        """Record one audit event.  Never raises, never blocks."""
        try:
            self._log(action, details)
        except Exception:
            logger.exception("Dropping audit event %r after internal error", action)

    def _log(self, action: str | AuditAction, details: Details) -> None:
        if not self._enabled:
            return
        name = action.value if isinstance(action, Enum) else action
        if not isinstance(name, str) or not name.strip():
            logger.debug("Ignoring audit event with empty action")
            return

        try:
            parsed = coerce_details(details)
        except ValidationError as exc:
            logger.warning(
                "Dropping audit event %s with invalid details: %d errors",
                name,
                exc.error_count(),
            )
            return

        if not self._dedup.accept(dedup_key(name, parsed.entity_id, parsed.section)):
            return

        envelope = build_envelope(
            name,
            parsed,
            identity=self._identity,
            route=self._route,
            build=self.config.build,
        )
        entry = QueueEntry(payload=envelope)
        self.queue.enqueue(entry)

        self._spawn(self.queue.persist())
        if self._connectivity.is_online():
            self._spawn(self.engine.eager_send(entry))

    # ------------------------------------------------------------------
    # Context
    # ------------------------------------------------------------------

    @property
    def identity(self) -> IdentityContext | None:
        return self._identity

    def set_user_context(self, identity: IdentityContext | None) -> None:
        """Replace the identity context; ``None`` means anonymous."""
        self._identity = identity

    @property
    def current_route(self) -> str:
        return self._route

    def set_route(self, route: str) -> None:
        self._route = route or "/"

    # ------------------------------------------------------------------
    # Enabled flag
    # ------------------------------------------------------------------

    def is_enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        """Toggle capture and flushing; the existing backlog is kept.

        The flag is saved in the background, or by the next ``init()`` or
        ``shutdown()`` when no event loop is running.
        """
        self._enabled = bool(enabled)
        self._enabled_unsaved = True
        self._spawn(self._save_enabled(self._enabled))

    async def _load_enabled(self) -> None:
        try:
            stored = await self._store.get(self.config.queue.enabled_storage_key)
        except Exception:
            logger.debug("Could not read audit enabled flag", exc_info=True)
            return
        if stored is not None:
            self._enabled = stored == "true"

    async def _save_enabled(self, enabled: bool) -> None:
        try:
            await self._store.set(
                self.config.queue.enabled_storage_key,
                "true" if enabled else "false",
            )
        except Exception:
            logger.debug("Could not persist audit enabled flag", exc_info=True)
            return
        if enabled == self._enabled:
            self._enabled_unsaved = False

    # ------------------------------------------------------------------
    # Delivery triggers
    # ------------------------------------------------------------------

    def queue_size(self) -> int:
        return len(self.queue)

    async def flush_now(self) -> None:
        """Run one flush in the caller's task when enabled."""
        if self._enabled:
            await self.engine.flush()

    async def drain(self) -> None:
        """Wait until every background task spawned so far has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _run_timer(self) -> None:
        interval = self.config.delivery.flush_interval_seconds
        while True:
            await asyncio.sleep(interval)
            if self._enabled:
                self._spawn(self.engine.flush())

    def _on_connectivity_change(self, online: bool) -> None:
        if online and self._enabled:
            self._spawn(self.engine.flush())
        if self.config.log_network_changes:
            self.log(
                AuditAction.NETWORK_STATUS_CHANGE,
                {"meta": {"status": "online" if online else "offline"}},
            )

    # ------------------------------------------------------------------
    # Background tasks
    # ------------------------------------------------------------------

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task[Any] | None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            coro.close()
            logger.debug("No running event loop; background audit work skipped")
            return None
        task = loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Background audit task failed", exc_info=exc)
