import logging
import uuid
from datetime import timedelta

from flask import Flask, g, render_template, request, session, url_for
from dotenv import load_dotenv

from app.portal.config import load_config
from app.portal.routes import bp as routes_bp
from app.portal.account import bp as account_bp
from app.portal.pages import bp as pages_bp


def create_app() -> Flask:
    load_dotenv()
    app = Flask(__name__, template_folder="templates", static_folder="static")
    app.config.from_mapping(load_config())
    app.config["PERMANENT_SESSION_LIFETIME"] = timedelta(hours=8)
    app.config["SESSION_REFRESH_EACH_REQUEST"] = True

    logging.basicConfig(level=app.config["LOG_LEVEL"], format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app.logger.setLevel(app.config["LOG_LEVEL"])

    # Production guardrails (fail fast with clear logs)
    env = (app.config.get("ENV") or "").strip().lower()
    if env in ("prod", "production"):
        if not app.config.get("SECRET_KEY") or str(app.config["SECRET_KEY"]) in ("", "change-me"):
            raise RuntimeError("SECRET_KEY must be set to a strong value in production (not default).")

    from app.portal.security import SAFE_METHODS, ensure_csrf_token, validate_csrf

    @app.context_processor
    def _inject_csrf() -> dict:
        return {"csrf_token": ensure_csrf_token()}

    @app.context_processor
    def _inject_navigation() -> dict:
        from app.portal.breadcrumbs import build_trail, is_breadcrumb_disabled, route_tree_for_path
        from app.portal.catalog import build_catalog
        from app.portal.menu import build_menu
        from app.portal.records import current_snapshot

        catalog = build_catalog(current_snapshot())
        return {
            "breadcrumbs": build_trail(route_tree_for_path(app, request.path)),
            "breadcrumb_disabled": is_breadcrumb_disabled,
            "crumb_href": lambda url: url_for("routes.follow_breadcrumb", to=url),
            "menu": build_menu(catalog, home_url=url_for("routes.index"), logout_url=url_for("account.logout")),
        }

    @app.before_request
    def _request_setup():
        if not getattr(g, "request_id", None):
            g.request_id = uuid.uuid4().hex
        if request.path.startswith(("/static/", "/health", "/healthz")):
            return None
        ensure_csrf_token()
        session.permanent = True
        if request.method not in SAFE_METHODS:
            # Logout only clears records; allow it without a token.
            if request.endpoint == "account.logout":
                return None
            if not validate_csrf(request):
                return render_template("errors/400.html", message="CSRF token missing or invalid."), 400

    app.register_blueprint(routes_bp)
    app.register_blueprint(account_bp, url_prefix="/account")
    app.register_blueprint(pages_bp)

    @app.errorhandler(400)
    def _err_400(e):  # type: ignore[no-redef]
        return render_template("errors/400.html", message=getattr(e, "description", None)), 400

    @app.errorhandler(404)
    def _err_404(e):  # type: ignore[no-redef]
        return render_template("errors/404.html"), 404

    @app.errorhandler(500)
    def _err_500(e):  # type: ignore[no-redef]
        app.logger.exception("Unhandled 500 (request_id=%s)", getattr(g, "request_id", None))
        return render_template("errors/500.html"), 500

    logging.getLogger(__name__).info("create_app() complete; app ready to serve")

    return app
