from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """
    A cached payload with its write timestamp.

    Attributes:
        collection: Cache collection (set list, cards by set, pricing, config)
        key: Key within the collection
        payload: JSON-serializable cached value
        written_at: Timezone-aware UTC time of the last successful write
    """

    collection: str
    key: str
    payload: Any
    written_at: datetime


@dataclass(frozen=True, slots=True)
class PricingResult:
    """
    Card pricing plus cache metadata.

    is_stale is True only when a refetch failed and an expired cached
    value was served instead.
    """

    card_id: str
    pricing: dict[str, Any]
    from_cache: bool
    cache_age: int | None = None
    is_stale: bool = False
