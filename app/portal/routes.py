from __future__ import annotations

from dataclasses import asdict

from flask import Blueprint, current_app, redirect, render_template, request, session, url_for

from app.portal.breadcrumbs import breadcrumb, breadcrumb_target, is_local_path
from app.portal.catalog import build_catalog
from app.portal.constants import DEEP_LINK_PARAM, PENDING_HIGHLIGHT_KEY
from app.portal.highlight import HighlightController, dashboard_categories
from app.portal.records import current_snapshot

bp = Blueprint("routes", __name__)


@bp.get("/")
@breadcrumb("Home")
def index():
    search = (request.args.get("q") or "").strip()
    categories = dashboard_categories(build_catalog(current_snapshot()), search)

    deep_link = request.args.get(DEEP_LINK_PARAM)
    if deep_link is not None:
        controller = HighlightController(categories)
        module = controller.request(deep_link)
        if module is not None:
            session[PENDING_HIGHLIGHT_KEY] = module.code
        else:
            session.pop(PENDING_HIGHLIGHT_KEY, None)
        current_app.logger.debug("Deep link %r resolved to %s", deep_link, module.code if module else None)
        # Drop the marker from the URL so a refresh does not scroll again.
        return redirect(url_for("routes.index", q=search or None), code=303)

    highlight_code = session.pop(PENDING_HIGHLIGHT_KEY, None)
    rendered = {m.code for c in categories for m in c.modules}
    if highlight_code not in rendered:
        highlight_code = None

    return render_template(
        "dashboard.html",
        categories=categories,
        search=search,
        highlight_code=highlight_code,
        highlight_duration_ms=current_app.config["HIGHLIGHT_DURATION_MS"],
        header_clearance_px=current_app.config["HEADER_CLEARANCE_PX"],
    )


@bp.get("/navigate")
def follow_breadcrumb():
    """Breadcrumb click: catalog modules open on the dashboard, anything else is followed as-is."""
    target = (request.args.get("to") or "").strip()
    if not is_local_path(target):
        return redirect(url_for("routes.index"))
    dashboard_url = url_for("routes.index")
    return redirect(breadcrumb_target(build_catalog(current_snapshot()), target, dashboard_url))


@bp.get("/catalog.json")
def catalog_json():
    catalog = build_catalog(current_snapshot())
    functions = []
    for function in catalog:
        data = asdict(function)
        data["modules"] = [dict(asdict(m), is_implemented=m.is_implemented) for m in function.modules]
        functions.append(data)
    return {"functions": functions}


@bp.get("/health")
def health():
    """Health check endpoint. Returns JSON."""
    return {"ok": True}


@bp.get("/healthz")
def healthz():
    return "ok", 200
