"""
vendors/uploads.py -- Certificate image validation shared by the API and web UI.

File storage is out of scope: the bytes are read only to enforce the size
cap, then discarded. The Document row points at MOCK_UPLOAD_URL so the
dashboard has something to link to.

upload objects are duck-typed: anything with .filename, .content_type and an
async .read(n) works (FastAPI's UploadFile in practice).
"""

from core.config import get_settings
from vendors.models import Document
from vendors.store import VendorStore

ALLOWED_IMAGE_TYPES = frozenset({"image/jpeg", "image/png", "image/gif", "image/webp", "image/jpg"})


class UploadRejected(ValueError):
    """Raised by validate_upload() with a client-safe message."""


async def validate_upload(upload) -> int:
    """Check presence, content type and size. Returns the size in bytes.

    Reads at most max_upload_bytes + 1 bytes so an oversized upload is never
    fully buffered.
    """
    if upload is None or not upload.filename:
        raise UploadRejected("No file provided.")
    if (upload.content_type or "").lower() not in ALLOWED_IMAGE_TYPES:
        raise UploadRejected("Only image files (JPEG, PNG, GIF, WebP) are allowed.")
    limit = get_settings().max_upload_bytes
    raw = await upload.read(limit + 1)
    if len(raw) > limit:
        raise UploadRejected(f"File size must be under {limit // (1024 * 1024)} MB.")
    return len(raw)


def record_document(store: VendorStore, user_id: int, upload, size: int) -> int:
    """Store a Document row for a validated upload and return its ID."""
    return store.create_document(
        Document(
            user_id=user_id,
            file_name=upload.filename,
            file_url=get_settings().mock_upload_url,
            content_type=(upload.content_type or "").lower(),
            size_bytes=size,
        )
    )
