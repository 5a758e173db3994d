"""Tests for set and card endpoints."""

from unittest.mock import AsyncMock

from httpx import AsyncClient

from pokeprice.models.failure import UpstreamError


class TestListSets:
    async def test_flat_list_newest_first(self, api_client: AsyncClient) -> None:
        response = await api_client.get("/sets")

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 4
        assert [s["code"] for s in data["sets"]] == ["PRE", "SSP", "CRZ", None]
        assert all(isinstance(s["id"], int) for s in data["sets"])

    async def test_grouped_by_expansion(self, api_client: AsyncClient) -> None:
        response = await api_client.get("/sets", params={"group_by_expansion": "true"})

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 4
        assert [g["label"] for g in data["groups"]] == [
            "Scarlet & Violet",
            "Sword & Shield",
            "XY",
        ]
        assert data["groups"][0]["type"] == "group"
        assert [s["code"] for s in data["groups"][0]["items"]] == ["PRE", "SSP"]

    async def test_upstream_down_serves_fallback(
        self, api_client: AsyncClient, pokedata_client: AsyncMock
    ) -> None:
        """The set list never fails; an empty fallback is still a 200."""
        pokedata_client.get_sets.side_effect = UpstreamError("PokeData", 503)

        response = await api_client.get("/sets")

        assert response.status_code == 200
        assert response.json() == {"sets": [], "count": 0}


class TestGetSet:
    async def test_found(self, api_client: AsyncClient) -> None:
        response = await api_client.get("/sets/557")

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Prismatic Evolutions"
        assert data["series_expansion"] == "Scarlet & Violet"

    async def test_not_found(self, api_client: AsyncClient) -> None:
        response = await api_client.get("/sets/9999")

        assert response.status_code == 404
        assert response.json() == {
            "error": "Set not found: 9999",
            "kind": "not_found",
            "detail": None,
        }


class TestListCards:
    async def test_cards_with_images(self, api_client: AsyncClient) -> None:
        response = await api_client.get("/sets/557/cards")

        assert response.status_code == 200
        data = response.json()
        assert data["set_id"] == 557
        assert data["total_count"] == 2
        assert data["total_pages"] == 1
        assert data["page_size"] == 500
        eevee = data["cards"][0]
        assert eevee["card_number"] == "074"
        assert eevee["image_small"] == "https://images.pokemontcg.io/sv8pt5/74.png"

    async def test_pagination(self, api_client: AsyncClient) -> None:
        response = await api_client.get("/sets/557/cards", params={"page": 2, "page_size": 1})

        data = response.json()
        assert [c["name"] for c in data["cards"]] == ["Umbreon ex"]
        assert data["total_pages"] == 2

    async def test_page_past_end_is_empty(self, api_client: AsyncClient) -> None:
        response = await api_client.get("/sets/557/cards", params={"page": 3, "page_size": 1})

        data = response.json()
        assert data["cards"] == []
        assert data["total_count"] == 2

    async def test_page_size_capped(self, api_client: AsyncClient) -> None:
        response = await api_client.get("/sets/557/cards", params={"page_size": 501})

        assert response.status_code == 422

    async def test_page_must_be_positive(self, api_client: AsyncClient) -> None:
        response = await api_client.get("/sets/557/cards", params={"page": 0})

        assert response.status_code == 422

    async def test_set_code_passed_through(
        self, api_client: AsyncClient, pokedata_client: AsyncMock
    ) -> None:
        response = await api_client.get("/sets/557/cards", params={"set_code": "PRE"})

        assert response.status_code == 200
        pokedata_client.get_cards_in_set.assert_awaited_once_with(557)

    async def test_upstream_down_is_empty_page(
        self, api_client: AsyncClient, pokedata_client: AsyncMock
    ) -> None:
        pokedata_client.get_cards_in_set.side_effect = UpstreamError("PokeData", 503)

        response = await api_client.get("/sets/557/cards")

        assert response.status_code == 200
        data = response.json()
        assert data["cards"] == []
        assert data["total_pages"] == 0
