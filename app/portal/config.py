import os
from dataclasses import dataclass

from app.portal.constants import DEFAULT_HEADER_CLEARANCE_PX, DEFAULT_HIGHLIGHT_DURATION_MS

OVERLAP_POLICIES = ("ignore", "warn", "strict")


@dataclass(frozen=True)
class Settings:
    secret_key: str
    env: str
    log_level: str

    catalog_overlap_policy: str
    highlight_duration_ms: int
    header_clearance_px: int


def _getenv(name: str, default: str = "") -> str:
    return (os.environ.get(name) or default).strip()


def _getenv_int(name: str, default: int) -> int:
    raw = _getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer (got {raw!r}).")


def load_settings() -> Settings:
    policy = _getenv("CATALOG_OVERLAP_POLICY", "warn").lower()
    if policy not in OVERLAP_POLICIES:
        raise RuntimeError(f"CATALOG_OVERLAP_POLICY must be one of: {', '.join(OVERLAP_POLICIES)}")
    return Settings(
        secret_key=_getenv("SECRET_KEY", "change-me"),
        env=_getenv("ENV", "development"),
        log_level=_getenv("LOG_LEVEL", "INFO").upper(),
        catalog_overlap_policy=policy,
        highlight_duration_ms=_getenv_int("HIGHLIGHT_DURATION_MS", DEFAULT_HIGHLIGHT_DURATION_MS),
        header_clearance_px=_getenv_int("HEADER_CLEARANCE_PX", DEFAULT_HEADER_CLEARANCE_PX),
    )


def load_config() -> dict:
    s = load_settings()
    is_production = s.env in ("prod", "production")
    return {
        "SECRET_KEY": s.secret_key,
        "ENV": s.env,
        "LOG_LEVEL": s.log_level,
        "CATALOG_OVERLAP_POLICY": s.catalog_overlap_policy,
        "HIGHLIGHT_DURATION_MS": s.highlight_duration_ms,
        "HEADER_CLEARANCE_PX": s.header_clearance_px,
        # security defaults
        "SESSION_COOKIE_HTTPONLY": True,
        "SESSION_COOKIE_SAMESITE": "Lax",
        "SESSION_COOKIE_SECURE": is_production,  # Require HTTPS in production
        # login packages are small JSON documents
        "MAX_CONTENT_LENGTH": 1 * 1024 * 1024,
    }
