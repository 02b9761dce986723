from sqlalchemy import Boolean, Column, DateTime, String
from sqlalchemy.sql import expression
from datetime import datetime
import pytz


def now_ist():
    return datetime.now(pytz.timezone('Asia/Kolkata'))


class TimestampMixin:
    """Mixin that provides created/updated timestamps and user info.

    Used on its own for rows that are never soft-deleted (sequence counters,
    users). Ledger rows combine it with `SoftDeleteMixin` through `AuditMixin`.
    """
    # Use timezone-aware timestamps to ensure all dates are stored in the desired timezone (Asia/Kolkata).
    # DateTime(timezone=True) ensures the timezone info is persisted in the database.
    created_at = Column(DateTime(timezone=True), default=now_ist)
    updated_at = Column(DateTime(timezone=True), onupdate=now_ist)
    created_by = Column(String, nullable=True)
    updated_by = Column(String, nullable=True)


class SoftDeleteMixin:
    """Mixin for soft-delete columns (is_deleted, deleted_at, deleted_by).

    Rows carrying `is_deleted` are hidden from ORM selects by the listener in
    `database.py`. Nothing in the API removes such a row physically.
    """
    is_deleted = Column(Boolean, default=False, server_default=expression.false(), nullable=False, index=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    deleted_by = Column(String, nullable=True)

    def mark_deleted(self, user_identifier):
        self.is_deleted = True
        self.deleted_at = now_ist()
        self.deleted_by = user_identifier

    def mark_restored(self, user_identifier):
        self.is_deleted = False
        self.deleted_at = None
        self.deleted_by = None
        self.updated_by = user_identifier


class AuditMixin(TimestampMixin, SoftDeleteMixin):
    """Timestamps + soft-delete, used by every ledger table."""
    pass
