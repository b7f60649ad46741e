from __future__ import annotations

from flask import Blueprint, abort, current_app, g, redirect, request, session, url_for

from app.portal.catalog import CatalogConfigError, build_catalog, validate_catalog
from app.portal.constants import PENDING_HIGHLIGHT_KEY
from app.portal.records import clear_records, snapshot_from_store, store_login_package

bp = Blueprint("account", __name__)


@bp.post("/status")
def status_post():
    """
    Store the navigation records of an account-status package.
    Credentials are checked upstream; this only keeps what the portal navigates by.
    """
    package = request.get_json(silent=True)
    if not isinstance(package, dict):
        abort(400)

    catalog = build_catalog(snapshot_from_store(package))
    policy = current_app.config.get("CATALOG_OVERLAP_POLICY", "warn")
    try:
        overlaps = validate_catalog(catalog, policy)
    except CatalogConfigError as e:
        current_app.logger.error("Rejected account records: %s request_id=%s", e, getattr(g, "request_id", None))
        return {"ok": False, "error": str(e)}, 422

    stored = store_login_package(session, package)
    current_app.logger.info(
        "Account records stored keys=%s functions=%s request_id=%s",
        ",".join(stored) or "-",
        len(catalog),
        getattr(g, "request_id", None),
    )
    return {
        "ok": True,
        "stored": stored,
        "functions": len(catalog),
        "url_overlaps": [[a.code, b.code] for a, b in overlaps],
    }


@bp.route("/logout", methods=["GET", "POST"])
def logout():
    clear_records(session)
    session.pop(PENDING_HIGHLIGHT_KEY, None)
    current_app.logger.info("Account records cleared request_id=%s", getattr(g, "request_id", None))
    return redirect(url_for("routes.index"))
