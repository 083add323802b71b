"""
vendors/models.py -- Domain dataclasses for vendor applications and documents.

These are pure data containers with zero logic. Validation lives at the API
and web layers; persistence lives in vendors/store.py.
"""

from dataclasses import dataclass
from typing import Optional

STALL_TYPES: tuple[str, ...] = (
    "Tea Stall",
    "Bookshop",
    "Food Counter",
    "Newspaper Stand",
    "General Store",
    "Pharmacy",
    "Mobile Accessories",
    "Other",
)

APPLICATION_STATUSES: tuple[str, ...] = ("Pending", "Approved", "Rejected")


@dataclass
class VendorApplication:
    """A licensing application for one stall, owned by the submitting user.

    Every application starts as "Pending"; a reviewer later moves it to
    "Approved" or "Rejected".

    id is None before the record is written to the database.
    """

    user_id: int
    vendor_name: str
    stall_type: str  # one of STALL_TYPES
    license_number: str
    status: str = "Pending"
    id: Optional[int] = None
    created_at: str = ""  # ISO 8601, set by store on insert


@dataclass
class Document:
    """Metadata for an uploaded certificate image.

    The file bytes are not kept; file_url points at the configured
    placeholder location.
    """

    user_id: int
    file_name: str
    file_url: str
    content_type: str = ""
    size_bytes: int = 0
    id: Optional[int] = None
    uploaded_at: str = ""  # ISO 8601, set by store on insert
