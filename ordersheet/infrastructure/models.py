"""SQLAlchemy models for database tables.

The catalog is persisted as a single JSON document in a key-value table,
the same shape the order desk has always kept in local storage.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String, Text

from ordersheet.infrastructure.database import Base


class KeyValueEntry(Base):
    """Key-value entry holding a serialized document."""

    __tablename__ = "kv_store"

    key = Column(String(200), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
