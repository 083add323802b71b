"""
api/routes/uploads.py -- Certificate image upload and document listing.

Routes:
  POST /api/upload     -- multipart "file"; validates type and size, records a Document
  GET  /api/documents  -- current user's documents, newest first

Validation rules live in vendors/uploads.py and are shared with the web
upload form.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile

from api.limiter import limiter
from api.models import DocumentResponse, UploadResponse
from auth.dependencies import get_current_session
from auth.models import SessionClaims
from vendors.store import VendorStore
from vendors.uploads import UploadRejected, record_document, validate_upload

router = APIRouter(dependencies=[Depends(get_current_session)])


@limiter.limit("20/minute")
@router.post("/upload", response_model=UploadResponse, status_code=201)
async def upload(
    request: Request,
    file: Optional[UploadFile] = File(default=None),  # noqa: B008
    session: SessionClaims = Depends(get_current_session),
) -> UploadResponse:
    """Accept a certificate image and record its metadata."""
    try:
        size = await validate_upload(file)
    except UploadRejected as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    vendor_store: VendorStore = request.app.state.vendor_store
    record_document(vendor_store, session.user_id, file, size)
    return UploadResponse(
        file_name=file.filename,
        message="File received (mock upload for production).",
    )


@router.get("/documents", response_model=list[DocumentResponse])
def list_documents(
    request: Request,
    session: SessionClaims = Depends(get_current_session),
) -> list[DocumentResponse]:
    vendor_store: VendorStore = request.app.state.vendor_store
    return [DocumentResponse.from_document(d) for d in vendor_store.list_documents(session.user_id)]
