"""
PokeData API client.

PokeData is the pricing source and owns the internal set ids:
- GET /sets                              all sets, every language
- GET /set?set_id=<id>                   cards in one set
- GET /pricing?id=<id>&asset_type=CARD   raw and graded prices for a card
"""

from typing import Any

from pokeprice.clients.http import get_json
from pokeprice.config import settings
from pokeprice.models.card import Card
from pokeprice.models.set import PokemonSet
from pokeprice.parsers.responses import (
    POKEDATA_SET_CARDS,
    POKEDATA_SETS,
    PokeDataCardRecord,
    PokeDataSetRecord,
    extract_items,
    parse_records,
    transform_pokedata_pricing,
)

SERVICE_NAME = "PokeData"


class PokeDataClient:
    """Client for the PokeData pricing API."""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
    ) -> None:
        """
        Initialize the PokeData client.

        Args:
            base_url: API base URL. Defaults to settings.pokedata_api_url.
            api_key: Bearer token. Defaults to settings.pokedata_api_key.
            timeout: Request timeout in seconds.
        """
        self.base_url = (base_url or settings.pokedata_api_url).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.pokedata_api_key
        self.timeout = timeout if timeout is not None else settings.http_timeout

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await get_json(
            SERVICE_NAME,
            f"{self.base_url}{path}",
            headers=self._headers(),
            params=params,
            timeout=self.timeout,
        )

    async def get_sets(self) -> list[PokemonSet]:
        """
        Fetch every set PokeData knows about.

        Raises:
            UpstreamError: If the request fails
        """
        data = await self._get("/sets")
        records = parse_records(extract_items(data, POKEDATA_SETS), PokeDataSetRecord)
        return [record.to_set() for record in records]

    async def get_cards_in_set(self, set_id: int) -> list[Card]:
        """
        Fetch the cards of one set, without pricing.

        Raises:
            UpstreamError: If the request fails
        """
        data = await self._get("/set", params={"set_id": set_id})
        records = parse_records(extract_items(data, POKEDATA_SET_CARDS), PokeDataCardRecord)
        return [record.to_card() for record in records]

    async def get_card_pricing(self, card_id: str) -> dict[str, Any]:
        """
        Fetch and flatten pricing for one card.

        Returns:
            Source -> amount mapping; empty if PokeData has no prices.

        Raises:
            UpstreamError: If the request fails
        """
        data = await self._get("/pricing", params={"id": card_id, "asset_type": "CARD"})
        return transform_pokedata_pricing(data)
