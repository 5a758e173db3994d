from pokeprice.models.cache import CacheEntry, PricingResult
from pokeprice.models.card import Card
from pokeprice.models.failure import (
    ErrorResponse,
    FailureKind,
    KnownError,
    MissingIdentifierError,
    SetNotFoundError,
    UpstreamError,
)
from pokeprice.models.mapping import MappingResult, MatchType, SetMappingEntry, UnmappedSet
from pokeprice.models.set import (
    PokemonSet,
    ensure_set_ids,
    is_synthesized_id,
    parse_release_date,
    sort_sets_by_release_date,
)

__all__ = [
    "CacheEntry",
    "Card",
    "ErrorResponse",
    "FailureKind",
    "KnownError",
    "MappingResult",
    "MatchType",
    "MissingIdentifierError",
    "PokemonSet",
    "PricingResult",
    "SetMappingEntry",
    "SetNotFoundError",
    "UnmappedSet",
    "UpstreamError",
    "ensure_set_ids",
    "is_synthesized_id",
    "parse_release_date",
    "sort_sets_by_release_date",
]
