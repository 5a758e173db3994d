from pokeprice.cache.base import CacheStore, cache_age_seconds, is_stale, utc_now
from pokeprice.cache.database import DatabaseCacheStore
from pokeprice.cache.memory import MemoryCacheStore

__all__ = [
    "CacheStore",
    "DatabaseCacheStore",
    "MemoryCacheStore",
    "cache_age_seconds",
    "is_stale",
    "utc_now",
]
