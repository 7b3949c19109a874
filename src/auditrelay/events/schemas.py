"""Audit event data models and the collector wire envelope."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import JsonValue

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class Dashboard(str, Enum):
    """Coarse application area derived from the current route."""

    user = "user"
    org_admin = "org_admin"
    super_admin = "super_admin"
    public = "public"
    unknown = "unknown"


class ActionResult(str, Enum):
    """Outcome of the audited action."""

    success = "success"
    failure = "failure"
    pending = "pending"
    cancelled = "cancelled"


class AppRole(str, Enum):
    """Role of the authenticated user."""

    user = "user"
    org_admin = "org_admin"
    super_admin = "super_admin"
    unknown = "unknown"


# ---------------------------------------------------------------------------
# Caller input
# ---------------------------------------------------------------------------


class AuditDetails(BaseModel):
    """Caller-supplied partial event details.

    The field set is closed: unknown keys, and the keys the constructor
    always derives itself, are dropped on validation.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    section: str | None = Field(
        default=None,
        description="UI component or section identifier.",
    )
    entity_type: str | None = Field(
        default=None,
        description="Kind of entity affected (org, user, alert, report, host).",
    )
    entity_id: str | list[str] | None = Field(
        default=None,
        description="Identifier(s) of the affected entity.",
    )
    result: ActionResult | None = Field(
        default=None,
        description="Outcome of the action.",
    )
    error: str | None = Field(
        default=None,
        description="Sanitized error message or code.",
    )
    query: str | None = Field(
        default=None,
        description="Search or filter text.",
    )
    changed_fields: list[str] | None = Field(
        default=None,
        description="Names of fields changed by an edit.",
    )
    meta: dict[str, JsonValue] | None = Field(
        default=None,
        description="Extra context (counts, summaries, file metadata).",
    )


class NavigationDetails(AuditDetails):
    """Details for route-change events, which also carry the source route."""

    from_route: str | None = None
    nav_method: str | None = None


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------


class IdentityContext(BaseModel):
    """Authenticated user context, replaced wholesale on every auth change."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    username: str
    client_id: int = 0
    role: AppRole = AppRole.unknown
    session_id: str


# ---------------------------------------------------------------------------
# Wire models
# ---------------------------------------------------------------------------


class AuditEvent(BaseModel):
    """The ``details`` object of an envelope: enough to say what happened."""

    model_config = ConfigDict(frozen=True)

    action: str = Field(min_length=1)
    dashboard: Dashboard
    route: str
    section: str | None = None
    entity_type: str | None = None
    entity_id: str | list[str] | None = None
    result: ActionResult | None = None
    error: str | None = None
    session_id: str
    environment: str
    app_version: str
    from_route: str | None = None
    nav_method: str | None = None
    query: str | None = None
    changed_fields: list[str] | None = None
    meta: dict[str, JsonValue] | None = None


class Envelope(BaseModel):
    """Exact payload POSTed to the collector."""

    model_config = ConfigDict(frozen=True)

    client_id: int
    user_id: str
    username: str
    details: AuditEvent
    timestamp: str = Field(description="ISO 8601 UTC timestamp.")

    def to_wire(self) -> dict[str, Any]:
        """Return the JSON-ready body, omitting absent optional fields."""
        return self.model_dump(mode="json", exclude_none=True)
