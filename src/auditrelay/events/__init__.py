"""Events domain: taxonomy, wire models, construction and deduplication."""

from auditrelay.events.actions import AuditAction
from auditrelay.events.builder import build_envelope
from auditrelay.events.builder import coerce_details
from auditrelay.events.builder import dashboard_for_route
from auditrelay.events.builder import new_session_id
from auditrelay.events.dedup import dedup_key
from auditrelay.events.dedup import Deduplicator
from auditrelay.events.schemas import ActionResult
from auditrelay.events.schemas import AppRole
from auditrelay.events.schemas import AuditDetails
from auditrelay.events.schemas import AuditEvent
from auditrelay.events.schemas import Dashboard
from auditrelay.events.schemas import Envelope
from auditrelay.events.schemas import IdentityContext
from auditrelay.events.schemas import NavigationDetails

__all__ = [
    "ActionResult",
    "AppRole",
    "AuditAction",
    "AuditDetails",
    "AuditEvent",
    "Dashboard",
    "Deduplicator",
    "Envelope",
    "IdentityContext",
    "NavigationDetails",
    "build_envelope",
    "coerce_details",
    "dashboard_for_route",
    "dedup_key",
    "new_session_id",
]
