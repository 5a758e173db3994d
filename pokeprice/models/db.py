"""
SQLAlchemy ORM models for persistent storage.

The server-side cache lives in a single table keyed by (collection, key).
Payloads are stored as JSON so every cached collection shares one schema.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class CacheEntryDB(Base):
    """
    A cached upstream payload.

    Overwritten on every successful refresh; written_at drives staleness.
    """

    __tablename__ = "cache_entries"
    __table_args__ = (UniqueConstraint("collection", "key", name="uq_cache_collection_key"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    collection: Mapped[str] = mapped_column(String(50), index=True)
    key: Mapped[str] = mapped_column(String(255), index=True)
    payload: Mapped[Any] = mapped_column(JSON)
    written_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"<CacheEntryDB(collection={self.collection}, key={self.key})>"
