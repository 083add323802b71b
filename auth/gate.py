"""
auth/gate.py -- Session resolution and protected-path gating.

The HTTP middleware in api/main.py calls resolve_session() once per request
and stores the result on request.state.session. Handlers and dependencies
read that value instead of decoding the cookie again.

gate_request() decides what happens to a request for a protected path:

  path not protected                 -> None (pass through)
  protected, no cookie               -> 302 /login
  protected, cookie fails to verify  -> 302 /login + cookie cleared
  protected, valid session           -> None (pass through)

Clearing the cookie on the failure branch stops a stale token from being
re-verified (and rejected) on every following request.

Layer rule: no imports from api/, web/, or vendors/.
"""

from __future__ import annotations

from collections.abc import Iterable

from starlette.requests import Request
from starlette.responses import RedirectResponse

from auth.models import SessionClaims
from auth.tokens import SESSION_COOKIE, clear_session_cookie, decode_access_token

LOGIN_PATH = "/login"


def is_protected(path: str, prefixes: Iterable[str]) -> bool:
    """Return True if path starts with any protected prefix (sub-paths included)."""
    return any(path.startswith(prefix) for prefix in prefixes)


def resolve_session(request: Request) -> SessionClaims | None:
    """Decode the session cookie on this request. None when absent or invalid."""
    token = request.cookies.get(SESSION_COOKIE)
    if not token:
        return None
    return decode_access_token(token)


def gate_request(
    request: Request,
    session: SessionClaims | None,
    prefixes: Iterable[str],
) -> RedirectResponse | None:
    """Return a redirect for a protected path without a valid session, else None."""
    if not is_protected(request.url.path, prefixes):
        return None
    if session is not None:
        return None
    resp = RedirectResponse(LOGIN_PATH, status_code=302)
    if request.cookies.get(SESSION_COOKIE):
        clear_session_cookie(resp)
    return resp
