"""
vendors/validation.py -- Application field rules shared by POST /api/vendors
and the /vendors/new form, so both report the same messages.
"""

from typing import Optional

from vendors.models import STALL_TYPES

MISSING_FIELDS_MESSAGE = "All fields are required."
UNKNOWN_STALL_TYPE_MESSAGE = f"Stall type must be one of: {', '.join(STALL_TYPES)}."


def application_error(vendor_name: str, stall_type: str, license_number: str) -> Optional[str]:
    """Return the client-facing error for already-stripped fields, or None if they are valid."""
    if not vendor_name or not stall_type or not license_number:
        return MISSING_FIELDS_MESSAGE
    if stall_type not in STALL_TYPES:
        return UNKNOWN_STALL_TYPE_MESSAGE
    return None
