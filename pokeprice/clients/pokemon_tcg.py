"""
Pokemon TCG API client.

The card/image source. Its set ids ("sv8pt5") are independent of PokeData's
integer ids; the set reconciler links the two.
"""

from pokeprice.clients.http import get_json
from pokeprice.config import settings
from pokeprice.parsers.responses import (
    POKEMON_TCG_SETS,
    TcgSetRecord,
    extract_items,
    parse_records,
)

SERVICE_NAME = "Pokemon TCG"

# API maximum; comfortably above the number of sets
PAGE_SIZE = 250


class PokemonTcgClient:
    """Client for the Pokemon TCG API (api.pokemontcg.io)."""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self.base_url = (base_url or settings.pokemon_tcg_api_url).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.pokemon_tcg_api_key
        self.timeout = timeout if timeout is not None else settings.http_timeout

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["X-Api-Key"] = self.api_key
        return headers

    async def get_sets(self) -> list[TcgSetRecord]:
        """
        Fetch all sets.

        Raises:
            UpstreamError: If the request fails
        """
        data = await get_json(
            SERVICE_NAME,
            f"{self.base_url}/sets",
            headers=self._headers(),
            params={"pageSize": PAGE_SIZE},
            timeout=self.timeout,
        )
        return parse_records(extract_items(data, POKEMON_TCG_SETS), TcgSetRecord)
