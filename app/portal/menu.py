from __future__ import annotations

from typing import Any

from app.portal.catalog import CatalogFunction, CatalogModule
from app.portal.constants import (
    DEFAULT_FUNCTION_ICON,
    DEFAULT_MODULE_ICON,
    FUNCTION_ICONS,
    LOGOUT_MODULE_CODE,
    MODULE_ICONS,
)


def function_icon(function_code: str) -> str:
    return FUNCTION_ICONS.get(function_code, DEFAULT_FUNCTION_ICON)


def module_icon(module_code: str) -> str:
    return MODULE_ICONS.get(module_code, DEFAULT_MODULE_ICON)


def _module_item(module: CatalogModule, logout_url: str) -> dict[str, Any]:
    if module.code == LOGOUT_MODULE_CODE:
        return {
            "label": module.name,
            "icon": module_icon(module.code),
            "url": logout_url,
            "disabled": False,
            "is_logout": True,
        }
    enabled = module.is_implemented
    return {
        "label": module.name,
        "icon": module_icon(module.code),
        "url": "/" + module.url.strip().lstrip("/") if enabled else None,
        "disabled": not enabled,
        "is_logout": False,
    }


def build_menu(
    catalog: list[CatalogFunction],
    *,
    home_label: str = "Home",
    home_url: str = "/",
    logout_url: str = "/account/logout",
) -> list[dict[str, Any]]:
    """
    Sidebar model: a Home entry, then one group per function holding its modules.
    Modules without a URL stay visible but disabled.
    """
    items: list[dict[str, Any]] = [{"label": home_label, "icon": "fa fa-home", "url": home_url, "items": []}]
    for function in catalog:
        items.append(
            {
                "label": function.name,
                "icon": function_icon(function.code),
                "url": None,
                "items": [_module_item(m, logout_url) for m in function.modules],
            }
        )
    return items
