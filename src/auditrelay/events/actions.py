"""Canonical audit action names."""

from __future__ import annotations

from enum import Enum


class AuditAction(str, Enum):
    """Taxonomy of auditable actions.

    ``log()`` accepts any non-empty string; these are the names the
    hosting application is expected to use.
    """

    # Navigation
    NAVIGATE_SECTION = "NAVIGATE_SECTION"
    DASHBOARD_SWITCH = "DASHBOARD_SWITCH"
    TAB_CHANGE = "TAB_CHANGE"
    DRAWER_OPEN = "DRAWER_OPEN"
    DRAWER_CLOSE = "DRAWER_CLOSE"
    DIALOG_OPEN = "DIALOG_OPEN"
    DIALOG_CLOSE = "DIALOG_CLOSE"

    # Alerts
    ALERT_TABLE_VIEW = "ALERT_TABLE_VIEW"
    ALERT_OPEN = "ALERT_OPEN"
    ALERT_ACKNOWLEDGE = "ALERT_ACKNOWLEDGE"
    ALERT_ACKNOWLEDGE_ALL = "ALERT_ACKNOWLEDGE_ALL"
    ALERT_RESOLVE = "ALERT_RESOLVE"
    ALERT_FILTER = "ALERT_FILTER"

    # Reports
    REPORT_VIEW = "REPORT_VIEW"
    REPORT_LIST_VIEW = "REPORT_LIST_VIEW"
    REPORT_DOWNLOAD = "REPORT_DOWNLOAD"
    REPORT_GENERATE = "REPORT_GENERATE"
    REPORT_FILTER = "REPORT_FILTER"

    # Users
    USER_CREATE = "USER_CREATE"
    USER_EDIT = "USER_EDIT"
    USER_DISABLE = "USER_DISABLE"
    USER_ENABLE = "USER_ENABLE"
    USER_DELETE = "USER_DELETE"

    # Organizations
    ORG_CREATE = "ORG_CREATE"
    ORG_EDIT = "ORG_EDIT"
    ORG_DISABLE = "ORG_DISABLE"
    ORG_ENABLE = "ORG_ENABLE"
    ORG_VIEW = "ORG_VIEW"

    # Settings
    SETTINGS_CHANGE = "SETTINGS_CHANGE"
    PROFILE_UPDATE = "PROFILE_UPDATE"

    # Search / filter
    SEARCH = "SEARCH"
    FILTER_APPLY = "FILTER_APPLY"
    PAGINATION = "PAGINATION"
    SORT = "SORT"

    # Export / import
    EXPORT = "EXPORT"
    IMPORT = "IMPORT"

    # Infrastructure views
    HOST_VIEW = "HOST_VIEW"
    HOST_DETAIL_OPEN = "HOST_DETAIL_OPEN"
    VEEAM_VIEW = "VEEAM_VIEW"
    VEEAM_DETAIL_OPEN = "VEEAM_DETAIL_OPEN"
    ZABBIX_VIEW = "ZABBIX_VIEW"

    # AI
    AI_INSIGHT_VIEW = "AI_INSIGHT_VIEW"
    AI_CHAT_OPEN = "AI_CHAT_OPEN"
    AI_CHAT_MESSAGE = "AI_CHAT_MESSAGE"

    # Errors
    API_ERROR = "API_ERROR"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    ROUTE_NOT_FOUND = "ROUTE_NOT_FOUND"
    NETWORK_STATUS_CHANGE = "NETWORK_STATUS_CHANGE"

    # Misc
    PAGE_VIEW = "PAGE_VIEW"
    BULK_ACTION = "BULK_ACTION"
    COMMAND_PALETTE_OPEN = "COMMAND_PALETTE_OPEN"
    THEME_TOGGLE = "THEME_TOGGLE"
    AUDIT_TOGGLE = "AUDIT_TOGGLE"
