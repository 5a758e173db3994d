"""
Database-backed cache store.

Persists entries to the cache_entries table so they survive restarts and
are shared between workers. Each operation runs in its own session and
commits immediately.
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pokeprice.cache.base import Clock, utc_now
from pokeprice.db.operations import (
    cache_entry_to_model,
    delete_cache_entry,
    get_cache_entry,
    upsert_cache_entry,
)
from pokeprice.models.cache import CacheEntry

logger = logging.getLogger(__name__)


class DatabaseCacheStore:
    """CacheStore over async SQLAlchemy."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        clock: Clock = utc_now,
    ) -> None:
        self._session_factory = session_factory
        self._clock = clock

    async def get(self, collection: str, key: str) -> CacheEntry | None:
        async with self._session_factory() as session:
            db_entry = await get_cache_entry(session, collection, key)
            if db_entry is None:
                logger.debug("Database cache miss: %s/%s", collection, key)
                return None
            return cache_entry_to_model(db_entry)

    async def put(self, collection: str, key: str, payload: Any) -> CacheEntry:
        written_at = self._clock()
        async with self._session_factory() as session:
            db_entry = await upsert_cache_entry(session, collection, key, payload, written_at)
            await session.commit()
            logger.debug("Saved %s/%s to database cache", collection, key)
            return cache_entry_to_model(db_entry)

    async def delete(self, collection: str, key: str) -> bool:
        async with self._session_factory() as session:
            deleted = await delete_cache_entry(session, collection, key)
            await session.commit()
            return deleted
