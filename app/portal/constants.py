"""
Central constants for the portal navigation layer.
"""
from __future__ import annotations

# Session keys written by the login package (see records.store_login_package)
FUNCTIONS_DETAILS_KEY = "Functions_Details"
MODULES_DETAILS_KEY = "Modules_Details"
ACCOUNT_SETTINGS_KEY = "Account_Settings"
RECORD_KEYS = (FUNCTIONS_DETAILS_KEY, MODULES_DETAILS_KEY, ACCOUNT_SETTINGS_KEY)

DEFAULT_LANGUAGE = "English"

# Query parameter carrying a breadcrumb target to the dashboard
DEEP_LINK_PARAM = "moduleUrl"

# Session key holding a resolved deep link between the redirect and the render
PENDING_HIGHLIGHT_KEY = "pending_highlight"

DEFAULT_HIGHLIGHT_DURATION_MS = 3000
DEFAULT_HEADER_CLEARANCE_PX = 80

# Module code that renders as the logout entry in the sidebar
LOGOUT_MODULE_CODE = "LGOT"

FUNCTION_ICONS = {
    "DBS": "fa fa-chart-pie",
    "SysAdm": "fa fa-cog",
    "EntAdm": "fa fa-building",
    "DC": "fa fa-file-alt",
    "FIN": "fa fa-receipt",
    "HR": "fa fa-user-tie",
    "CRM": "fa fa-handshake",
    "SCM": "fa fa-truck",
    "PC": "fa fa-project-diagram",
}
DEFAULT_FUNCTION_ICON = "fa fa-folder"

MODULE_ICONS = {
    "ACT": "fa fa-bolt",
    "NOT": "fa fa-bell",
    "PRF": "fa fa-user",
    "SET": "fa fa-cog",
    "LGOT": "fa fa-sign-out-alt",
    "SDB": "fa fa-chart-line",
    "ERPF": "fa fa-puzzle-piece",
    "ERPM": "fa fa-cubes",
    "ENTDT": "fa fa-building",
    "USRACC": "fa fa-users",
    "WF": "fa fa-sync-alt",
    "TS": "fa fa-clock",
    "FCOA": "fa fa-book",
}
DEFAULT_MODULE_ICON = "fa fa-file"
