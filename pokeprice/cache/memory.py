"""
In-process cache store.

Keeps entries in a dict for the lifetime of the process. Used as the
local tier for single-process deployments and as the store in tests.
"""

import copy
import logging
from typing import Any

from pokeprice.cache.base import Clock, utc_now
from pokeprice.models.cache import CacheEntry

logger = logging.getLogger(__name__)


class MemoryCacheStore:
    """Dict-backed CacheStore. Payloads are copied in and out."""

    def __init__(self, clock: Clock = utc_now) -> None:
        self._clock = clock
        self._entries: dict[tuple[str, str], CacheEntry] = {}

    async def get(self, collection: str, key: str) -> CacheEntry | None:
        entry = self._entries.get((collection, key))
        if entry is None:
            logger.debug("Cache miss: %s/%s", collection, key)
            return None

        return CacheEntry(
            collection=entry.collection,
            key=entry.key,
            payload=copy.deepcopy(entry.payload),
            written_at=entry.written_at,
        )

    async def put(self, collection: str, key: str, payload: Any) -> CacheEntry:
        entry = CacheEntry(
            collection=collection,
            key=key,
            payload=copy.deepcopy(payload),
            written_at=self._clock(),
        )
        self._entries[(collection, key)] = entry
        logger.debug("Cached %s/%s", collection, key)
        return entry

    async def delete(self, collection: str, key: str) -> bool:
        return self._entries.pop((collection, key), None) is not None

    def __len__(self) -> int:
        return len(self._entries)
