"""Process-scoped audit API.

One default ``AuditPipeline`` per process, for hosts that prefer plain
function hooks over passing a pipeline around.  Call ``configure(...)``
at startup to inject storage, transport and connectivity; otherwise a
pipeline with in-memory storage and ``AuditConfig.from_env()`` is
created on first use.
"""

from __future__ import annotations

from auditrelay.config import AuditConfig
from auditrelay.connectivity import ConnectivityObserver
from auditrelay.delivery import HttpSender
from auditrelay.events import AuditAction
from auditrelay.events import IdentityContext
from auditrelay.pipeline import AuditPipeline
from auditrelay.pipeline import Details
from auditrelay.storage import KeyValueStore

_pipeline: AuditPipeline | None = None


def configure(
    *,
    config: AuditConfig | None = None,
    store: KeyValueStore | None = None,
    sender: HttpSender | None = None,
    connectivity: ConnectivityObserver | None = None,
) -> AuditPipeline:
    """Install a new default pipeline and return it.

    A previously installed pipeline should be shut down first with
    ``destroy_audit_logger()``.
    """
    global _pipeline
    _pipeline = AuditPipeline(
        config=config or AuditConfig.from_env(),
        store=store,
        sender=sender,
        connectivity=connectivity,
    )
    return _pipeline


def get_pipeline() -> AuditPipeline:
    """Return the default pipeline, creating it on first use."""
    if _pipeline is None:
        return configure()
    return _pipeline


def _reset_pipeline() -> None:
    """Forget the default pipeline; used by test cleanup."""
    global _pipeline
    _pipeline = None


def log(action: str | AuditAction, details: Details = None) -> None:
    """Record an audit event on the default pipeline."""
    get_pipeline().log(action, details)


async def init_audit_logger() -> None:
    """Startup hook: restore the backlog and start periodic delivery."""
    await get_pipeline().init()


async def destroy_audit_logger() -> None:
    """Teardown hook: stop delivery and persist the backlog."""
    if _pipeline is not None:
        await _pipeline.shutdown()


def set_audit_user_context(identity: IdentityContext | None) -> None:
    get_pipeline().set_user_context(identity)


def is_audit_enabled() -> bool:
    return get_pipeline().is_enabled()


def set_audit_enabled(enabled: bool) -> None:
    get_pipeline().set_enabled(enabled)


def get_audit_queue_size() -> int:
    """Backlog size, for operator diagnostics."""
    return get_pipeline().queue_size()
