"""
Placeholder pages for catalog module URLs.

The real screens are served elsewhere; these keep every catalog URL (and its
sub-routes) reachable so breadcrumbs and deep links always have a target.
"""
from __future__ import annotations

from flask import Blueprint, render_template

from app.portal.breadcrumbs import breadcrumb
from app.portal.catalog import build_catalog, iter_modules
from app.portal.records import current_snapshot
from app.portal.resolver import normalize_url, resolve_module_by_url

bp = Blueprint("pages", __name__)


def _page_label(module_path: str) -> str:
    path = normalize_url(module_path)
    catalog = build_catalog(current_snapshot())
    for function in catalog:
        if function.url and normalize_url(function.url) == path:
            return function.name
    for module in iter_modules(catalog):
        if module.is_implemented and normalize_url(module.url) == path:
            return module.name
    return path.rsplit("/", 1)[-1].replace("-", " ").title()


@bp.get("/<path:module_path>")
@breadcrumb(_page_label)
def module_page(module_path: str):
    module = resolve_module_by_url(build_catalog(current_snapshot()), module_path)
    return render_template("pages/module.html", module=module, module_path=normalize_url(module_path))
