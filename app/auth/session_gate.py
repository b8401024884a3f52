# app/auth/session_gate.py
"""Cookie-based session gate.

PLACEHOLDER AUTH, NOT FOR PRODUCTION: the ``isAuthenticated`` cookie is set
for any non-empty email/password pair, is neither signed nor httpOnly, and
can be forged by any client. Replace with a real identity provider
(e.g. ``firebase_admin.auth.verify_id_token``) before exposing the dashboard.
"""
from fastapi import Request, Response
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.status import HTTP_303_SEE_OTHER

from app.config import AUTH_COOKIE_NAME, AUTH_COOKIE_MAX_AGE

LOGIN_PATH = "/login"
LANDING_PATH = "/dashboard"
EXEMPT_PREFIXES = ("/api", "/static", "/favicon.ico")


def is_authenticated(request: Request) -> bool:
    return request.cookies.get(AUTH_COOKIE_NAME) == "true"


def is_exempt(path: str) -> bool:
    return any(path == p or path.startswith(p.rstrip("/") + "/") for p in EXEMPT_PREFIXES)


def gate_redirect(path: str, authenticated: bool):
    """Where a request for ``path`` must be sent instead, or ``None`` to pass."""
    if is_exempt(path):
        return None
    if not authenticated and path != LOGIN_PATH:
        return LOGIN_PATH
    if authenticated and path == LOGIN_PATH:
        return LANDING_PATH
    return None


class SessionGateMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        target = gate_redirect(request.url.path, is_authenticated(request))
        if target is not None:
            return RedirectResponse(url=target, status_code=HTTP_303_SEE_OTHER)
        return await call_next(request)


def set_auth_cookie(response: Response) -> None:
    response.set_cookie(AUTH_COOKIE_NAME, "true", max_age=AUTH_COOKIE_MAX_AGE, path="/", httponly=False, samesite="lax")


def clear_auth_cookie(response: Response) -> None:
    response.delete_cookie(AUTH_COOKIE_NAME, path="/")
