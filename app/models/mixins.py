"""
Database model mixins for common functionality.
"""
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional
from sqlalchemy import Column, String, DateTime


def generate_id() -> str:
    """Opaque string primary key."""
    return uuid.uuid4().hex


def as_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalise a stored timestamp to naive UTC (SQLite drops tzinfo, PostgreSQL keeps it)."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class IdMixin:
    """Adds an opaque string primary key."""
    id = Column(String(64), primary_key=True, default=generate_id)


class TimestampMixin:
    """Mixin for creation/update timestamps (naive UTC)."""
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    def touch(self) -> None:
        """
        Refresh updated_at.

        The new value is always strictly greater than the previous one, even
        when two updates land within the clock's resolution.
        """
        now = datetime.utcnow()
        previous = as_naive_utc(self.updated_at)
        if previous is not None and now <= previous:
            now = previous + timedelta(microseconds=1)
        self.updated_at = now
