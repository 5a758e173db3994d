"""
Database CRUD operations.

Provides async functions for reading, upserting and deleting single cache entries.
"""

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pokeprice.models.cache import CacheEntry
from pokeprice.models.db import CacheEntryDB


async def get_cache_entry(session: AsyncSession, collection: str, key: str) -> CacheEntryDB | None:
    """
    Get a cache entry by collection and key.

    Returns None if nothing has been cached under that key.
    """
    result = await session.execute(
        select(CacheEntryDB).where(
            CacheEntryDB.collection == collection,
            CacheEntryDB.key == key,
        )
    )
    return result.scalar_one_or_none()


async def upsert_cache_entry(
    session: AsyncSession,
    collection: str,
    key: str,
    payload: Any,
    written_at: datetime,
) -> CacheEntryDB:
    """
    Insert or overwrite a cache entry.

    If an entry with the same collection+key exists, replaces its payload
    and timestamp. Otherwise creates a new record.
    """
    existing = await get_cache_entry(session, collection, key)

    if existing:
        existing.payload = payload
        existing.written_at = written_at
        await session.flush()
        return existing

    db_entry = CacheEntryDB(
        collection=collection,
        key=key,
        payload=payload,
        written_at=written_at,
    )
    session.add(db_entry)
    await session.flush()
    return db_entry


async def delete_cache_entry(session: AsyncSession, collection: str, key: str) -> bool:
    """
    Delete a single cache entry.

    Returns True if deleted, False if not found.
    """
    existing = await get_cache_entry(session, collection, key)
    if not existing:
        return False

    await session.delete(existing)
    return True


def cache_entry_to_model(db_entry: CacheEntryDB) -> CacheEntry:
    """Convert a database cache entry to a domain model."""
    written_at = db_entry.written_at
    # SQLite drops tzinfo on the way back out
    if written_at.tzinfo is None:
        written_at = written_at.replace(tzinfo=UTC)

    return CacheEntry(
        collection=db_entry.collection,
        key=db_entry.key,
        payload=db_entry.payload,
        written_at=written_at,
    )
