"""
vendors/store.py -- SQLAlchemy-backed persistence for applications and documents.

Uses SQLAlchemy Core (not ORM) so the dataclasses in vendors/models.py remain
the authoritative domain representation. Swapping SQLite for PostgreSQL is a
connection string change in core/config.py, not a rewrite.

Pattern: Repository + Data Mapper. VendorStore is the repository; the
_row_to_* functions are the mappers. Route handlers never touch SQL directly.

Security: all queries use bound parameters. No f-strings in SQL. Every read
that serves a user is filtered by user_id so one account cannot list
another account's applications or documents.

Layer rule: vendors/ imports only stdlib, third-party libraries and core/.
Ownership is recorded as a plain user_id; vendors/ does not import auth/.

Usage:
    store = VendorStore(get_engine())
    app_id = store.create_application(VendorApplication(user_id=1, ...))
    apps = store.list_applications(user_id=1)
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, Integer, MetaData, String, Table, func, select
from sqlalchemy.engine import Engine

from vendors.models import APPLICATION_STATUSES, Document, VendorApplication

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_applications = Table(
    "vendor_applications",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, nullable=False, index=True),
    Column("vendor_name", String(255), nullable=False),
    Column("stall_type", String(50), nullable=False),
    Column("license_number", String(100), nullable=False),
    Column("status", String(20), nullable=False, server_default="Pending"),
    Column("created_at", String(32), nullable=False),
)

_documents = Table(
    "documents",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, nullable=False, index=True),
    Column("file_name", String(255), nullable=False),
    Column("file_url", String(1024), nullable=False),
    Column("content_type", String(100)),
    Column("size_bytes", Integer, nullable=False, server_default="0"),
    Column("uploaded_at", String(32), nullable=False),
)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class VendorStore:
    """Repository for VendorApplication and Document records."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        metadata.create_all(self.engine)

    # ------------------------------------------------------------------
    # Applications
    # ------------------------------------------------------------------

    def create_application(self, application: VendorApplication) -> int:
        """Insert a new application and return its ID. Status always starts at Pending."""
        with self.engine.connect() as conn:
            result = conn.execute(
                _applications.insert().values(
                    user_id=application.user_id,
                    vendor_name=application.vendor_name,
                    stall_type=application.stall_type,
                    license_number=application.license_number,
                    status="Pending",
                    created_at=_now_iso(),
                )
            )
            conn.commit()
            return result.inserted_primary_key[0]

    def get_application(self, application_id: int) -> Optional[VendorApplication]:
        with self.engine.connect() as conn:
            row = conn.execute(_applications.select().where(_applications.c.id == application_id)).fetchone()
        return _row_to_application(row) if row is not None else None

    def list_applications(self, user_id: Optional[int] = None) -> list[VendorApplication]:
        """Return applications newest first, optionally limited to one owner."""
        query = _applications.select()
        if user_id is not None:
            query = query.where(_applications.c.user_id == user_id)
        query = query.order_by(_applications.c.created_at.desc(), _applications.c.id.desc())
        with self.engine.connect() as conn:
            rows = conn.execute(query).fetchall()
        return [_row_to_application(r) for r in rows]

    def update_status(self, application_id: int, status: str) -> bool:
        """Set an application's review status. Returns False if the ID is unknown.

        Raises ValueError for a status outside APPLICATION_STATUSES.
        """
        if status not in APPLICATION_STATUSES:
            raise ValueError(f"Unknown application status: {status!r}")
        with self.engine.connect() as conn:
            result = conn.execute(
                _applications.update().where(_applications.c.id == application_id).values(status=status)
            )
            conn.commit()
        return result.rowcount > 0

    def get_status_counts(self, user_id: int) -> dict[str, int]:
        """Return {"Pending": n, "Approved": n, "Rejected": n} for one owner."""
        counts = {status: 0 for status in APPLICATION_STATUSES}
        with self.engine.connect() as conn:
            rows = conn.execute(
                select(_applications.c.status, func.count())
                .where(_applications.c.user_id == user_id)
                .group_by(_applications.c.status)
            ).fetchall()
        for status, n in rows:
            counts[status] = n
        return counts

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    def create_document(self, document: Document) -> int:
        with self.engine.connect() as conn:
            result = conn.execute(
                _documents.insert().values(
                    user_id=document.user_id,
                    file_name=document.file_name,
                    file_url=document.file_url,
                    content_type=document.content_type,
                    size_bytes=document.size_bytes,
                    uploaded_at=_now_iso(),
                )
            )
            conn.commit()
            return result.inserted_primary_key[0]

    def list_documents(self, user_id: int) -> list[Document]:
        """Return one owner's documents, newest first."""
        with self.engine.connect() as conn:
            rows = conn.execute(
                _documents.select()
                .where(_documents.c.user_id == user_id)
                .order_by(_documents.c.uploaded_at.desc(), _documents.c.id.desc())
            ).fetchall()
        return [_row_to_document(r) for r in rows]


# ---------------------------------------------------------------------------
# Row mappers (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_application(row) -> VendorApplication:
    return VendorApplication(
        id=row.id,
        user_id=row.user_id,
        vendor_name=row.vendor_name,
        stall_type=row.stall_type,
        license_number=row.license_number,
        status=row.status,
        created_at=row.created_at,
    )


def _row_to_document(row) -> Document:
    return Document(
        id=row.id,
        user_id=row.user_id,
        file_name=row.file_name,
        file_url=row.file_url,
        content_type=row.content_type or "",
        size_bytes=row.size_bytes,
        uploaded_at=row.uploaded_at,
    )
