"""Convenience emitters on top of ``AuditPipeline.log``.

``SectionAuditLogger`` attaches a default section to every event and
offers shorthands for the common UI actions.  ``RouteTracker`` turns
route changes into navigation and dashboard-switch events.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from auditrelay.events import AuditAction
from auditrelay.events import dashboard_for_route
from auditrelay.events import NavigationDetails
from auditrelay.events.schemas import ActionResult
from auditrelay.pipeline import AuditPipeline

_MAX_QUERY_LENGTH = 100
_MAX_ERROR_LENGTH = 200


class SectionAuditLogger:
    """Audit emitter bound to one UI section."""

    def __init__(self, pipeline: AuditPipeline, section: str | None = None) -> None:
        self._pipeline = pipeline
        self.section = section

    def log(self, action: str | AuditAction, **details: Any) -> None:
        """Log *action*; an explicit ``section`` overrides the bound one."""
        if details.get("section") is None:
            details["section"] = self.section
        self._pipeline.log(action, details)

    def log_page_view(self, section: str, meta: Mapping[str, Any] | None = None) -> None:
        self.log(AuditAction.PAGE_VIEW, section=section, meta=_dict(meta))

    def log_tab_change(self, tab_name: str) -> None:
        self.log(AuditAction.TAB_CHANGE, meta={"tab": tab_name})

    def log_drawer_open(self, drawer_name: str, entity_id: str | None = None) -> None:
        self.log(AuditAction.DRAWER_OPEN, section=drawer_name, entity_id=entity_id)

    def log_drawer_close(self, drawer_name: str) -> None:
        self.log(AuditAction.DRAWER_CLOSE, section=drawer_name)

    def log_dialog_open(self, dialog_name: str) -> None:
        self.log(AuditAction.DIALOG_OPEN, section=dialog_name)

    def log_search(self, query: str, section: str | None = None) -> None:
        self.log(AuditAction.SEARCH, query=query[:_MAX_QUERY_LENGTH], section=section)

    def log_filter(self, filters: Mapping[str, Any]) -> None:
        self.log(AuditAction.FILTER_APPLY, meta=dict(filters))

    def log_pagination(self, page: int, section: str | None = None) -> None:
        self.log(AuditAction.PAGINATION, section=section, meta={"page": page})

    def log_crud(
        self,
        action: str | AuditAction,
        entity_type: str,
        entity_id: str | None = None,
        result: ActionResult | str | None = None,
        extra: Mapping[str, Any] | None = None,
    ) -> None:
        self.log(
            action,
            entity_type=entity_type,
            entity_id=entity_id,
            result=result,
            meta=_dict(extra),
        )

    def log_error(
        self,
        error: str,
        section: str | None = None,
        meta: Mapping[str, Any] | None = None,
    ) -> None:
        self.log(
            AuditAction.API_ERROR,
            error=error[:_MAX_ERROR_LENGTH],
            section=section,
            meta=_dict(meta),
        )

    def log_download(
        self,
        file_name: str,
        file_type: str | None = None,
        entity_id: str | None = None,
        result: ActionResult | str = ActionResult.success,
    ) -> None:
        self.log(
            AuditAction.REPORT_DOWNLOAD,
            entity_type="report",
            entity_id=entity_id,
            result=result,
            meta={"fileName": file_name, "fileType": file_type},
        )


class RouteTracker:
    """Emits ``NAVIGATE_SECTION`` and ``DASHBOARD_SWITCH`` on route changes."""

    def __init__(self, pipeline: AuditPipeline) -> None:
        self._pipeline = pipeline
        self._path: str | None = None
        self._dashboard: str | None = None

    def navigate(self, path: str, *, nav_method: str = "route_change") -> None:
        if path == self._path:
            return
        dashboard = dashboard_for_route(path).value
        previous = self._path

        self._pipeline.set_route(path)
        self._pipeline.log(
            AuditAction.NAVIGATE_SECTION,
            NavigationDetails(from_route=previous, section=path, nav_method=nav_method),
        )
        if self._dashboard is not None and self._dashboard != dashboard:
            self._pipeline.log(
                AuditAction.DASHBOARD_SWITCH,
                NavigationDetails(
                    from_route=previous,
                    meta={"from_dashboard": self._dashboard, "to_dashboard": dashboard},
                ),
            )

        self._path = path
        self._dashboard = dashboard


def _dict(mapping: Mapping[str, Any] | None) -> dict[str, Any] | None:
    return dict(mapping) if mapping is not None else None
