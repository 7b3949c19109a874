"""Event construction: route bucketing, context enrichment, envelope assembly."""

from __future__ import annotations

import random
import string
import time
from collections.abc import Mapping
from datetime import datetime
from datetime import UTC
from typing import Any

from auditrelay.config import BuildInfo
from auditrelay.events.schemas import AuditDetails
from auditrelay.events.schemas import AuditEvent
from auditrelay.events.schemas import Dashboard
from auditrelay.events.schemas import Envelope
from auditrelay.events.schemas import IdentityContext

ANONYMOUS = "anonymous"

_BASE36 = string.ascii_lowercase + string.digits

# Ordered: first matching prefix wins.
_DASHBOARD_PREFIXES: tuple[tuple[str, Dashboard], ...] = (
    ("/super-admin", Dashboard.super_admin),
    ("/admin", Dashboard.org_admin),
    ("/dashboard", Dashboard.user),
)

_PUBLIC_PREFIXES = (
    "/login",
    "/signup",
    "/forgot",
    "/reset",
    "/2fa",
    "/privacy",
    "/terms",
)


def dashboard_for_route(route: str) -> Dashboard:
    """Map a route path to its coarse dashboard bucket."""
    for prefix, dashboard in _DASHBOARD_PREFIXES:
        if route.startswith(prefix):
            return dashboard
    if route == "/" or route.startswith(_PUBLIC_PREFIXES):
        return Dashboard.public
    return Dashboard.unknown


def _random_suffix(length: int) -> str:
    return "".join(random.choices(_BASE36, k=length))


def new_session_id() -> str:
    """Mint a session id of the form ``ses_<epoch-ms>_<6 chars>``."""
    return f"ses_{int(time.time() * 1000)}_{_random_suffix(6)}"


def iso_timestamp(moment: datetime) -> str:
    """Format *moment* as UTC ISO 8601 with millisecond precision."""
    return (
        moment.astimezone(UTC)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def coerce_details(
    details: AuditDetails | Mapping[str, Any] | None,
) -> AuditDetails:
    """Validate caller details, dropping reserved and unknown keys."""
    if details is None:
        return AuditDetails()
    if isinstance(details, AuditDetails):
        return details
    return AuditDetails.model_validate(dict(details))


def build_envelope(
    action: str,
    details: AuditDetails,
    *,
    identity: IdentityContext | None,
    route: str,
    build: BuildInfo,
    now: datetime | None = None,
) -> Envelope:
    """Assemble the wire envelope for one event.

    Caller fields override the derived defaults, except ``action``,
    ``dashboard``, ``route``, ``session_id`` and ``environment``, which
    are always derived here.
    """
    session_id = (identity.session_id if identity else "") or ANONYMOUS
    fields: dict[str, Any] = {
        "session_id": session_id,
        "environment": build.environment,
        "app_version": build.app_version,
    }
    fields.update(details.model_dump(exclude_none=True))
    fields.update(
        action=action,
        dashboard=dashboard_for_route(route),
        route=route,
        session_id=session_id,
        environment=build.environment,
    )

    return Envelope(
        client_id=identity.client_id if identity else 0,
        user_id=(identity.user_id if identity else "") or ANONYMOUS,
        username=(identity.username if identity else "") or ANONYMOUS,
        details=AuditEvent(**fields),
        timestamp=iso_timestamp(now or datetime.now(tz=UTC)),
    )
