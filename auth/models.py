"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Mirrors the approach
in vendors/models.py -- dataclasses own domain shape; stores and routes do
the work.

Layer rule: no imports from api/, web/, core/, or vendors/.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    """A registered Vendorify account.

    email is the login identifier and is UNIQUE in the users table.
    hashed_password is the bcrypt hash; the plaintext is never stored.
    id is None before the record is written to the database.
    """

    name: str
    email: str
    hashed_password: str
    id: int | None = None
    created_at: str | None = None

    def public_fields(self) -> dict:
        """Return the fields safe to send to a client (never the hash)."""
        return {"id": self.id, "name": self.name, "email": self.email}


@dataclass(frozen=True)
class SessionClaims:
    """Identity carried by a verified session token.

    issued_at / expires_at are timezone-aware UTC datetimes decoded from the
    iat / exp claims.
    """

    user_id: int
    email: str
    name: str
    issued_at: datetime
    expires_at: datetime
