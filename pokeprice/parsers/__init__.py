from pokeprice.parsers.responses import (
    POKEDATA_SET_CARDS,
    POKEDATA_SETS,
    POKEMON_TCG_SETS,
    Envelope,
    PokeDataCardRecord,
    PokeDataSetRecord,
    TcgSetRecord,
    extract_items,
    parse_records,
    transform_pokedata_pricing,
    unwrap_pricing,
)

__all__ = [
    "Envelope",
    "POKEDATA_SETS",
    "POKEDATA_SET_CARDS",
    "POKEMON_TCG_SETS",
    "PokeDataCardRecord",
    "PokeDataSetRecord",
    "TcgSetRecord",
    "extract_items",
    "parse_records",
    "transform_pokedata_pricing",
    "unwrap_pricing",
]
