"""
api/main.py -- FastAPI application entry point for Vendorify.

Run with:      uvicorn asgi:app --reload

Middleware stack (outermost to innermost):
  1. TrustedHostMiddleware -- rejects requests with unexpected Host headers
  2. CORSMiddleware        -- adds CORS headers for allowed browser origins
  3. SlowAPIMiddleware     -- enforces per-route rate limits from api.limiter
  4. log_requests          -- one access-log line per request
  5. session_gate          -- resolves the session once; guards protected paths

Lifespan handles startup (engine + stores) and shutdown (engine disposal)
symmetrically.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.limiter import limiter
from api.models import ErrorResponse, HealthResponse
from api.routes.auth import router as auth_router
from api.routes.uploads import router as uploads_router
from api.routes.vendors import router as vendors_router
from auth.gate import gate_request, resolve_session
from auth.store import UserStore
from core.config import get_settings
from core.database import dispose_engine, get_engine
from vendors.store import VendorStore

__version__ = "0.1.0"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("vendorify.api")

settings = get_settings()

# ---------------------------------------------------------------------------
# Lifespan -- startup / shutdown
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the process-wide engine and stores; dispose the engine on shutdown.

    Both stores share one Engine (one connection pool) from core.database.
    """
    logger.info("Vendorify starting up (env=%s)", settings.app_env)
    engine = get_engine()
    app.state.user_store = UserStore(engine)
    app.state.vendor_store = VendorStore(engine)
    logger.info("Stores initialized (%d users)", app.state.user_store.count_users())

    yield

    dispose_engine()
    logger.info("Vendorify shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Vendorify",
    description="Vendor licensing: applications, certificate uploads, and a vendor dashboard.",
    version=__version__,
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# Middleware stack
#
# add_middleware() wraps the app, so the LAST registered class middleware is
# the outermost. @app.middleware("http") functions are registered the same
# way. Registration below runs innermost-first: session_gate, log_requests,
# SlowAPI, CORS, TrustedHost.
# ---------------------------------------------------------------------------


@app.middleware("http")
async def session_gate(request: Request, call_next):
    """Resolve the session once per request and guard protected paths.

    The decoded claims (or None) are stored on request.state.session, which
    auth.dependencies and web handlers read instead of re-decoding the cookie.
    """
    session = resolve_session(request)
    request.state.session = session
    if redirect := gate_request(request, session, settings.protected_prefixes):
        return redirect
    return await call_next(request)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %d %.1fms %s",
        request.method,
        request.url.path,
        response.status_code,
        ms,
        request.client.host if request.client else "unknown",
    )
    return response


app.add_middleware(SlowAPIMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type"],
    max_age=3600,
)

app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.allowed_hosts)

# SlowAPI looks for app.state.limiter by convention.
app.state.limiter = limiter

# ---------------------------------------------------------------------------
# Router registration
# ---------------------------------------------------------------------------

app.include_router(auth_router, prefix="/api", tags=["Auth"])
app.include_router(vendors_router, prefix="/api", tags=["Vendors"])
app.include_router(uploads_router, prefix="/api", tags=["Uploads"])
# Web UI router is mounted by asgi.py, not here.


# ---------------------------------------------------------------------------
# Exception handlers
#
# All handlers return the same {"error": "<message>"} envelope so clients can
# read failures uniformly.
# ---------------------------------------------------------------------------


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


def _retry_after_seconds(exc: RateLimitExceeded) -> int:
    """Length of the exceeded limit's window, e.g. 60 for "10/minute"."""
    limit = getattr(exc, "limit", None)
    item = getattr(limit, "limit", None)
    if item is None:
        return 60
    return int(item.get_expiry())


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Return 429 with Retry-After when a rate limit is exceeded."""
    retry_after = _retry_after_seconds(exc)
    response = _error(429, "Too many requests.")
    response.headers["Retry-After"] = str(retry_after)
    return response


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies are a client error: 400, field locations kept in the server log.

    Only loc/type are logged -- the errors also carry the raw input, which
    may be a password.
    """
    problems = [(err.get("loc"), err.get("type")) for err in exc.errors()]
    logger.info("Rejected request body on %s %s: %s", request.method, request.url.path, problems)
    return _error(400, "Invalid request body.")


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    response = _error(exc.status_code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected server errors.

    The raw exception goes to the server log only, never to the response body.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return _error(500, "Internal server error.")


# ---------------------------------------------------------------------------
# Health endpoint
# ---------------------------------------------------------------------------


@app.get("/api/health", tags=["Health"])
async def health() -> HealthResponse:
    """Return API liveness and current version."""
    return HealthResponse(version=__version__)
