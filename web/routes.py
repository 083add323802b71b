"""
web/routes.py -- Jinja2 template routes for the Vendorify web UI.

These routes serve server-rendered HTML. They share app.state with the API
routes (same user and vendor stores) but return HTML and redirects instead
of JSON.

Protected pages (/dashboard*, /vendors/new*) are guarded by the session
gate middleware in api/main.py before any handler here runs, so inside
those handlers request.state.session is always a valid SessionClaims.

Route registration order matters: GET /dashboard/upload is registered
before any broader /dashboard route, and /vendors/new before /vendors.

Routes:
  GET  /                  -- landing page
  GET  /about             -- about page
  GET  /login             -- login / signup form (?tab=signup, ?error=code)
  POST /login             -- handle password login
  POST /signup            -- handle account creation
  POST /logout            -- clear cookie, redirect /login
  GET  /dashboard         -- applications, documents, status counts (protected)
  GET  /dashboard/upload  -- certificate upload form (protected)
  POST /dashboard/upload  -- handle upload (protected)
  GET  /vendors/new       -- new application form (protected)
  POST /vendors/new       -- handle application submission (protected)
  GET  /vendors           -- public directory of approved vendors
"""

import logging
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, File, Form, Request, UploadFile
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.exc import IntegrityError

from auth.dependencies import try_get_session
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
from vendors.models import STALL_TYPES, VendorApplication
from vendors.store import VendorStore
from vendors.uploads import UploadRejected, record_document, validate_upload
from vendors.validation import application_error

logger = logging.getLogger("vendorify.web")

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))
# layout.html calls this to decide between "Sign in" and "Log out" links
# without every handler passing the session explicitly.
templates.env.globals["try_get_session"] = try_get_session
router = APIRouter()

# Whitelist mapping for ?error= query params on /login.
# The raw query param is NEVER passed to templates -- only the message from
# this dict is. Prevents reflected XSS via crafted error query strings.
_ERROR_MESSAGES: dict[str, str] = {
    "bad_credentials": "Invalid email or password.",
    "missing_fields": "Email and password are required.",
}

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _redirect_with_session(user: User, location: str) -> RedirectResponse:
    resp = RedirectResponse(location, status_code=302)
    set_session_cookie(resp, issue_session_token(user))
    resp.headers["Cache-Control"] = "no-store"
    return resp


def _login_page(
    request: Request,
    tab: str = "login",
    error_msg: Optional[str] = None,
    form_data: Optional[dict] = None,
    status_code: int = 200,
) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "login.html",
        {
            "tab": "signup" if tab == "signup" else "login",
            "error_msg": error_msg,
            "form_data": form_data or {},
            "min_password_length": MIN_PASSWORD_LENGTH,
        },
        status_code=status_code,
    )


# ---------------------------------------------------------------------------
# Public pages
# ---------------------------------------------------------------------------


@router.get("/", response_class=HTMLResponse)
def home(request: Request) -> HTMLResponse:
    return templates.TemplateResponse(request, "home.html", {"stall_types": STALL_TYPES})


@router.get("/about", response_class=HTMLResponse)
def about(request: Request) -> HTMLResponse:
    return templates.TemplateResponse(request, "about.html", {})


@router.get("/vendors", response_class=HTMLResponse)
def vendor_directory(request: Request) -> HTMLResponse:
    """List approved vendors. Pending and rejected applications are never shown publicly."""
    vendor_store: VendorStore = request.app.state.vendor_store
    approved = [a for a in vendor_store.list_applications() if a.status == "Approved"]
    return templates.TemplateResponse(request, "vendors.html", {"vendors": approved})


# ---------------------------------------------------------------------------
# Auth routes -- login, signup, logout
# ---------------------------------------------------------------------------


@router.get("/login", response_class=HTMLResponse)
def login_form(request: Request) -> HTMLResponse:
    """Render the login/signup page. Signed-in users go straight to the dashboard."""
    if try_get_session(request) is not None:
        return RedirectResponse("/dashboard", status_code=302)
    error_msg = _ERROR_MESSAGES.get(request.query_params.get("error", ""))
    return _login_page(request, tab=request.query_params.get("tab", "login"), error_msg=error_msg)


@router.post("/login", response_class=HTMLResponse)
def login_post(
    request: Request,
    email: str = Form(default=""),
    password: str = Form(default=""),
) -> RedirectResponse:
    """Handle the login form. Errors redirect back with a whitelisted error code."""
    email = email.strip().lower()
    if not email or not password:
        return RedirectResponse("/login?error=missing_fields", status_code=302)

    user_store: UserStore = request.app.state.user_store
    user = authenticate_user(user_store, email, password)
    if user is None:
        return RedirectResponse("/login?error=bad_credentials", status_code=302)
    return _redirect_with_session(user, "/dashboard")


@router.post("/signup", response_class=HTMLResponse)
def signup_post(
    request: Request,
    name: str = Form(default=""),
    email: str = Form(default=""),
    password: str = Form(default=""),
) -> HTMLResponse:
    """Handle the signup form. Same rules and messages as POST /api/auth/signup."""
    name = name.strip()
    email = email.strip().lower()
    form_data = {"name": name, "email": email}

    if not name or not email or not password:
        return _login_page(
            request,
            tab="signup",
            error_msg="Name, email, and password are required.",
            form_data=form_data,
            status_code=400,
        )
    if len(password) < MIN_PASSWORD_LENGTH:
        return _login_page(
            request,
            tab="signup",
            error_msg=f"Password must be at least {MIN_PASSWORD_LENGTH} characters.",
            form_data=form_data,
            status_code=400,
        )

    user_store: UserStore = request.app.state.user_store
    user = User(name=name, email=email, hashed_password=hash_password(password))
    try:
        user.id = user_store.create_user(user)
    except IntegrityError:
        return _login_page(
            request,
            tab="signup",
            error_msg="An account with this email already exists.",
            form_data=form_data,
            status_code=409,
        )
    logger.info("User %d signed up via web form", user.id)
    return _redirect_with_session(user, "/dashboard")


@router.post("/logout")
def logout(request: Request) -> RedirectResponse:
    """Clear the session cookie and redirect to the login page."""
    resp = RedirectResponse("/login", status_code=302)
    clear_session_cookie(resp)
    return resp


# ---------------------------------------------------------------------------
# Protected pages
# ---------------------------------------------------------------------------


@router.get("/dashboard/upload", response_class=HTMLResponse)
def upload_form(request: Request) -> HTMLResponse:
    return templates.TemplateResponse(request, "upload.html", {"error": None, "uploaded": None})


@router.post("/dashboard/upload", response_class=HTMLResponse)
async def upload_post(
    request: Request,
    file: Optional[UploadFile] = File(default=None),  # noqa: B008
) -> HTMLResponse:
    session = request.state.session
    try:
        size = await validate_upload(file)
    except UploadRejected as exc:
        return templates.TemplateResponse(
            request,
            "upload.html",
            {"error": str(exc), "uploaded": None},
            status_code=400,
        )
    vendor_store: VendorStore = request.app.state.vendor_store
    record_document(vendor_store, session.user_id, file, size)
    return templates.TemplateResponse(request, "upload.html", {"error": None, "uploaded": file.filename})


@router.get("/dashboard", response_class=HTMLResponse)
def dashboard(request: Request) -> HTMLResponse:
    session = request.state.session
    vendor_store: VendorStore = request.app.state.vendor_store
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "session": session,
            "applications": vendor_store.list_applications(user_id=session.user_id),
            "documents": vendor_store.list_documents(session.user_id),
            "status_counts": vendor_store.get_status_counts(session.user_id),
        },
    )


@router.get("/vendors/new", response_class=HTMLResponse)
def application_form(request: Request) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "vendor_new.html",
        {"stall_types": STALL_TYPES, "form_data": {}, "error": None, "submitted": None},
    )


@router.post("/vendors/new", response_class=HTMLResponse)
def application_submit(
    request: Request,
    vendor_name: str = Form(default=""),
    stall_type: str = Form(default=""),
    license_number: str = Form(default=""),
) -> HTMLResponse:
    session = request.state.session
    form_data = {
        "vendor_name": vendor_name.strip(),
        "stall_type": stall_type.strip(),
        "license_number": license_number.strip(),
    }

    error = application_error(**form_data)
    if error:
        return templates.TemplateResponse(
            request,
            "vendor_new.html",
            {"stall_types": STALL_TYPES, "form_data": form_data, "error": error, "submitted": None},
            status_code=400,
        )

    vendor_store: VendorStore = request.app.state.vendor_store
    application_id = vendor_store.create_application(VendorApplication(user_id=session.user_id, **form_data))
    return templates.TemplateResponse(
        request,
        "vendor_new.html",
        {
            "stall_types": STALL_TYPES,
            "form_data": {},
            "error": None,
            "submitted": vendor_store.get_application(application_id),
        },
    )
