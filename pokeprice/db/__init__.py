from pokeprice.db.database import async_session_factory, dispose_db, get_session, init_db
from pokeprice.db.operations import (
    cache_entry_to_model,
    delete_cache_entry,
    get_cache_entry,
    upsert_cache_entry,
)

__all__ = [
    "async_session_factory",
    "cache_entry_to_model",
    "delete_cache_entry",
    "dispose_db",
    "get_cache_entry",
    "get_session",
    "init_db",
    "upsert_cache_entry",
]
