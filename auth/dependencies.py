"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication.

The session is resolved once per request by the gate middleware and stored
on request.state.session. These helpers read it back:

  try_get_session()     -- SessionClaims or None, never raises.
  get_current_session() -- raises HTTP 401 when there is no valid session.
  get_current_user()    -- loads the User record behind the session; 401 if
                           the account no longer exists.

If the middleware did not run (a handler called directly from a unit test),
the cookie is decoded here instead.

Layer rule: no imports from api/, web/, or vendors/.
"""

from __future__ import annotations

from fastapi import HTTPException, Request

from auth.gate import resolve_session
from auth.models import SessionClaims, User

_UNSET = object()


def try_get_session(request: Request) -> SessionClaims | None:
    """Return the resolved session for this request, or None."""
    session = getattr(request.state, "session", _UNSET)
    if session is _UNSET:
        session = resolve_session(request)
        request.state.session = session
    return session


def get_current_session(request: Request) -> SessionClaims:
    """Require a valid session. Raises HTTP 401 if the request is not authenticated.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(session: SessionClaims = Depends(get_current_session)): ...
    """
    session = try_get_session(request)
    if session is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return session


def get_current_user(request: Request) -> User:
    """Require a valid session whose user still exists in the store."""
    session = get_current_session(request)
    user = request.app.state.user_store.get_by_id(session.user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user
