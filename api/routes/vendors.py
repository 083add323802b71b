"""
api/routes/vendors.py -- Vendor application endpoints.

Routes:
  GET  /api/vendors  -- current user's applications, newest first
  POST /api/vendors  -- submit a new application (status starts at Pending)

Both routes require a session. Applications are always scoped to the
session's user_id; there is no way to read or create on behalf of another
account through this router.
"""

from fastapi import APIRouter, Depends, HTTPException, Request

from api.limiter import limiter
from api.models import VendorApplicationCreate, VendorApplicationResponse
from auth.dependencies import get_current_session
from auth.models import SessionClaims
from vendors.models import VendorApplication
from vendors.store import VendorStore
from vendors.validation import application_error

# Router-level dependency applies to every route registered on this router.
router = APIRouter(dependencies=[Depends(get_current_session)])


@limiter.limit("60/minute")
@router.get("/vendors", response_model=list[VendorApplicationResponse])
def list_applications(
    request: Request,
    session: SessionClaims = Depends(get_current_session),
) -> list[VendorApplicationResponse]:
    vendor_store: VendorStore = request.app.state.vendor_store
    applications = vendor_store.list_applications(user_id=session.user_id)
    return [VendorApplicationResponse.from_application(a) for a in applications]


@limiter.limit("30/minute")
@router.post("/vendors", response_model=VendorApplicationResponse, status_code=201)
def create_application(
    request: Request,
    body: VendorApplicationCreate,
    session: SessionClaims = Depends(get_current_session),
) -> VendorApplicationResponse:
    """Submit a vendor application for the signed-in user."""
    vendor_name = body.vendor_name or ""
    stall_type = body.stall_type or ""
    license_number = body.license_number or ""
    error = application_error(vendor_name, stall_type, license_number)
    if error:
        raise HTTPException(status_code=400, detail=error)

    vendor_store: VendorStore = request.app.state.vendor_store
    application_id = vendor_store.create_application(
        VendorApplication(
            user_id=session.user_id,
            vendor_name=vendor_name,
            stall_type=stall_type,
            license_number=license_number,
        )
    )
    return VendorApplicationResponse.from_application(vendor_store.get_application(application_id))
