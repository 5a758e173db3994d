from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

DATA_DIR = Path(__file__).parent / "data"


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "PokePrice"
    debug: bool = False

    database_url: str = "postgresql+asyncpg://localhost:5432/pokeprice"

    pokedata_api_url: str = "https://www.pokedata.io/v0"
    pokedata_api_key: str = ""

    pokemon_tcg_api_url: str = "https://api.pokemontcg.io/v2"
    pokemon_tcg_api_key: str = ""

    # Upstream request timeout (seconds)
    http_timeout: float = 30.0

    # Initial set-list load races the upstream fetch against this timer
    set_list_timeout: float = 5.0

    set_list_ttl_hours: float = 24.0
    pricing_ttl_hours: float = 24.0
    current_set_revalidate_hours: float = 24.0

    set_mapping_path: Path = DATA_DIR / "set_mapping.json"
    fallback_sets_path: Path = DATA_DIR / "fallback_sets.json"

    # Name-similarity + date-proximity reconciliation thresholds
    reconcile_max_date_delta_days: int = 90
    reconcile_min_shared_words: int = 2
    reconcile_min_word_length: int = 3


settings = Settings()


# =============================================================================
# CACHE COLLECTIONS
# =============================================================================

SET_LIST_COLLECTION = "set_list"
CARDS_BY_SET_COLLECTION = "cards_by_set"
CARD_PRICING_COLLECTION = "card_pricing"
CONFIG_COLLECTION = "config"

# Page size bounds for the cards endpoint
MAX_PAGE_SIZE = 500
