"""
api/routes/auth.py -- Signup, login, logout, and current-user endpoints.

Routes:
  POST /api/auth/signup  -- create account; sets session cookie; 201
  POST /api/auth/login   -- email/password login; sets session cookie; 200
  POST /api/auth/logout  -- clears session cookie; 200
  GET  /api/auth/me      -- current user's public fields (requires session)

Security:
  Duplicate emails are detected from the UNIQUE constraint (IntegrityError),
  never from a lookup before the insert, so concurrent signups for one email
  cannot both succeed.
  authenticate_user() provides timing equalization -- use it, never inline
  get_by_email() + verify_password().
  Unknown email and wrong password produce the same 401 body.
  POST /login is rate-limited per client IP (LOGIN_RATE_LIMIT).
  Cache-Control: no-store on responses that carry a fresh token.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from api.limiter import limiter
from api.models import LoginRequest, MessageResponse, SignupRequest, UserResponse
from auth.dependencies import get_current_user
from auth.models import User
from auth.store import UserStore
from auth.tokens import (
    MIN_PASSWORD_LENGTH,
    authenticate_user,
    clear_session_cookie,
    hash_password,
    issue_session_token,
    set_session_cookie,
)
from core.config import get_settings

logger = logging.getLogger("vendorify.auth")

# Auth policy:
# - POST /api/auth/signup: public
# - POST /api/auth/login:  public, rate-limited
# - POST /api/auth/logout: public -- clearing a cookie needs no prior auth
# - GET  /api/auth/me:     requires session (get_current_user)
router = APIRouter()


def _session_response(user: User, status_code: int) -> JSONResponse:
    """Build the JSON body for a freshly authenticated user and attach the cookie."""
    resp = JSONResponse(status_code=status_code, content=UserResponse.from_user(user).model_dump())
    set_session_cookie(resp, issue_session_token(user))
    resp.headers["Cache-Control"] = "no-store"
    return resp


@router.post("/auth/signup", response_model=UserResponse, status_code=201)
def signup(request: Request, body: SignupRequest) -> JSONResponse:
    """Create an account, then sign the new user in."""
    if not body.name or not body.email or not body.password:
        raise HTTPException(status_code=400, detail="Name, email, and password are required.")
    if len(body.password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"Password must be at least {MIN_PASSWORD_LENGTH} characters.",
        )

    user_store: UserStore = request.app.state.user_store
    new_user = User(name=body.name, email=body.email, hashed_password=hash_password(body.password))
    try:
        new_user.id = user_store.create_user(new_user)
    except IntegrityError as exc:
        logger.info("Signup rejected: email already registered")
        raise HTTPException(status_code=409, detail="An account with this email already exists.") from exc

    logger.info("User %d signed up", new_user.id)
    return _session_response(new_user, status_code=201)


@limiter.limit(get_settings().login_rate_limit)  # must be ABOVE @router to preserve FastAPI introspection
@router.post("/auth/login", response_model=UserResponse)
def login(request: Request, body: LoginRequest) -> JSONResponse:
    """Authenticate with email and password; set the session cookie."""
    if not body.email or not body.password:
        raise HTTPException(status_code=400, detail="Email and password are required.")

    user_store: UserStore = request.app.state.user_store
    user = authenticate_user(user_store, body.email, body.password)
    if user is None:
        resp = JSONResponse(status_code=401, content={"error": "Invalid email or password."})
        resp.headers["Cache-Control"] = "no-store"
        return resp

    logger.info("User %d logged in", user.id)
    return _session_response(user, status_code=200)


@router.post("/auth/logout", response_model=MessageResponse)
def logout() -> JSONResponse:
    """Expire the session cookie with the same attributes it was set with."""
    resp = JSONResponse(content={"message": "Logged out"})
    clear_session_cookie(resp)
    return resp


@router.get("/auth/me", response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)) -> UserResponse:
    """Return the public fields of the signed-in user."""
    return UserResponse.from_user(current_user)
