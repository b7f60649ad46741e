import secrets

from flask import Request, session

SAFE_METHODS = ("GET", "HEAD", "OPTIONS")
CSRF_SESSION_KEY = "csrf_token"
CSRF_HEADER = "X-CSRF-Token"


def ensure_csrf_token() -> str:
    """Return the session's CSRF token, minting one on first use."""
    return session.setdefault(CSRF_SESSION_KEY, secrets.token_urlsafe(32))


def _submitted_token(req: Request) -> str | None:
    token = req.headers.get(CSRF_HEADER) or req.form.get(CSRF_SESSION_KEY)
    if token:
        return token
    # Login packages arrive as JSON objects
    if req.is_json:
        body = req.get_json(silent=True)
        if isinstance(body, dict):
            return body.get(CSRF_SESSION_KEY)
    return None


def validate_csrf(req: Request) -> bool:
    submitted = _submitted_token(req)
    expected = session.get(CSRF_SESSION_KEY)
    if not submitted or not expected:
        return False
    return secrets.compare_digest(str(submitted), str(expected))
