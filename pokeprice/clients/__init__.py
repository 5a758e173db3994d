from pokeprice.clients.pokedata import PokeDataClient
from pokeprice.clients.pokemon_tcg import PokemonTcgClient
from pokeprice.clients.retry import retry_with_backoff

__all__ = [
    "PokeDataClient",
    "PokemonTcgClient",
    "retry_with_backoff",
]
