"""auditrelay: at-least-once delivery of client audit events."""

from auditrelay.api import configure
from auditrelay.api import destroy_audit_logger
from auditrelay.api import get_audit_queue_size
from auditrelay.api import get_pipeline
from auditrelay.api import init_audit_logger
from auditrelay.api import is_audit_enabled
from auditrelay.api import log
from auditrelay.api import set_audit_enabled
from auditrelay.api import set_audit_user_context
from auditrelay.config import AuditConfig
from auditrelay.connectivity import ConnectivityMonitor
from auditrelay.events import AuditAction
from auditrelay.events import AuditDetails
from auditrelay.events import Envelope
from auditrelay.events import IdentityContext
from auditrelay.pipeline import AuditPipeline
from auditrelay.tracking import RouteTracker
from auditrelay.tracking import SectionAuditLogger

__all__ = [
    "AuditAction",
    "AuditConfig",
    "AuditDetails",
    "AuditPipeline",
    "ConnectivityMonitor",
    "Envelope",
    "IdentityContext",
    "RouteTracker",
    "SectionAuditLogger",
    "configure",
    "destroy_audit_logger",
    "get_audit_queue_size",
    "get_pipeline",
    "init_audit_logger",
    "is_audit_enabled",
    "log",
    "set_audit_enabled",
    "set_audit_user_context",
]
