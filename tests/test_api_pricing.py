"""Tests for the card pricing endpoint."""

from unittest.mock import AsyncMock

from httpx import AsyncClient

from pokeprice.models.failure import UpstreamError


class TestCardPricing:
    async def test_fresh_fetch(self, api_client: AsyncClient) -> None:
        response = await api_client.get("/cards/73121/pricing", params={"set_id": 557})

        assert response.status_code == 200
        assert response.json() == {
            "card_id": "73121",
            "pricing": {"psa": {"10": 412.5}, "tcgPlayer": 38.2},
            "from_cache": False,
            "cache_age": 0,
            "is_stale": False,
        }

    async def test_served_from_cache(self, api_client: AsyncClient, clock) -> None:
        await api_client.get("/cards/73121/pricing")
        clock.advance(minutes=30)

        response = await api_client.get("/cards/73121/pricing")

        data = response.json()
        assert data["from_cache"] is True
        assert data["cache_age"] == 1800

    async def test_stale_when_refresh_fails(
        self, api_client: AsyncClient, pokedata_client: AsyncMock, clock
    ) -> None:
        await api_client.get("/cards/73121/pricing")
        clock.advance(hours=25)
        pokedata_client.get_card_pricing.side_effect = UpstreamError("PokeData", 503)

        response = await api_client.get("/cards/73121/pricing")

        assert response.status_code == 200
        data = response.json()
        assert data["is_stale"] is True
        assert data["pricing"]["tcgPlayer"] == 38.2

    async def test_upstream_error_without_cache(
        self, api_client: AsyncClient, pokedata_client: AsyncMock
    ) -> None:
        """Nothing cached and upstream down renders the error body with 502."""
        pokedata_client.get_card_pricing.side_effect = UpstreamError(
            "PokeData", 401, "Invalid API key"
        )

        response = await api_client.get("/cards/73121/pricing")

        assert response.status_code == 502
        assert response.json() == {
            "error": "PokeData API error: 401. Details: Invalid API key",
            "kind": "external_api_error",
            "detail": "Invalid API key",
        }
