"""
Cache store contract and TTL policy helpers.

Stores are dumb key-value holders: they stamp entries on write and hand
them back on read. Whether an entry is still usable is decided by the
caller through is_stale(), so one store can serve collections with
different TTL policies.
"""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any, Protocol

from pokeprice.models.cache import CacheEntry

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


def is_stale(written_at: datetime, ttl: timedelta, now: datetime | None = None) -> bool:
    """
    Check whether an entry has outlived its TTL.

    True iff now - written_at > ttl. An entry exactly ttl old is not stale.
    """
    if now is None:
        now = utc_now()
    return now - written_at > ttl


def cache_age_seconds(written_at: datetime, now: datetime | None = None) -> int:
    """Age of an entry in whole seconds."""
    if now is None:
        now = utc_now()
    return int((now - written_at).total_seconds())


class CacheStore(Protocol):
    """Key-value store for cached upstream payloads, partitioned by collection."""

    async def get(self, collection: str, key: str) -> CacheEntry | None:
        """Return the entry, or None if nothing is cached under key."""
        ...

    async def put(self, collection: str, key: str, payload: Any) -> CacheEntry:
        """Overwrite the entry for key, stamping it with the current time."""
        ...

    async def delete(self, collection: str, key: str) -> bool:
        """Remove the entry. Returns True if something was removed."""
        ...
