"""
Card API endpoints.

Cards of a set, paginated, with image URLs where the set is mapped to the
Pokemon TCG API.
"""

from math import ceil
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from pokeprice.api.dependencies import get_data_service
from pokeprice.config import MAX_PAGE_SIZE
from pokeprice.models.card import Card
from pokeprice.services.data_service import DataService

router = APIRouter(tags=["cards"])


class CardResponse(BaseModel):
    """Response model for a single card."""

    id: str
    set_id: int
    name: str
    card_number: str = ""
    set_code: str | None = None
    set_name: str | None = None
    rarity: str | None = None
    pricing: dict[str, Any] = Field(default_factory=dict)
    image_small: str | None = None
    image_large: str | None = None

    @classmethod
    def from_card(cls, card: Card) -> "CardResponse":
        return cls.model_validate(card.to_dict())


class CardPageResponse(BaseModel):
    """One page of a set's cards."""

    set_id: int
    cards: list[CardResponse]
    total_count: int
    page: int
    page_size: int
    total_pages: int


@router.get("/sets/{set_id}/cards", response_model=CardPageResponse)
async def list_cards_in_set(
    set_id: int,
    service: Annotated[DataService, Depends(get_data_service)],
    set_code: str | None = None,
    force_refresh: bool = False,
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = MAX_PAGE_SIZE,
) -> CardPageResponse:
    """
    Get the cards of a set.

    If upstream is unavailable, previously cached cards are served; a set
    that was never cached yields an empty page rather than an error.
    """
    cards = await service.get_cards_for_set(set_id, set_code=set_code, force_refresh=force_refresh)

    start = (page - 1) * page_size
    page_cards = cards[start : start + page_size]

    return CardPageResponse(
        set_id=set_id,
        cards=[CardResponse.from_card(c) for c in page_cards],
        total_count=len(cards),
        page=page,
        page_size=page_size,
        total_pages=ceil(len(cards) / page_size),
    )
