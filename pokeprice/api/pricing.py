"""
Pricing API endpoints.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from pokeprice.api.dependencies import get_data_service
from pokeprice.services.data_service import DataService

router = APIRouter(prefix="/cards", tags=["pricing"])


class PricingResponse(BaseModel):
    """Card pricing with cache metadata."""

    card_id: str
    pricing: dict[str, Any] = Field(default_factory=dict)
    from_cache: bool = Field(
        ...,
        description="True if served from the cache rather than a fresh upstream fetch",
    )
    cache_age: int | None = Field(
        default=None,
        description="Age of the pricing data in seconds",
    )
    is_stale: bool = Field(
        default=False,
        description="True if the data is past its TTL because a refresh failed",
    )


@router.get("/{card_id}/pricing", response_model=PricingResponse)
async def get_card_pricing(
    card_id: str,
    service: Annotated[DataService, Depends(get_data_service)],
    set_id: int | None = None,
) -> PricingResponse:
    """
    Get raw and graded prices for a card.

    Prices are cached for 24 hours. When a refresh fails, the last cached
    prices are returned with is_stale set. Returns 502 only if the upstream
    fails and nothing was ever cached.
    """
    result = await service.get_card_pricing(card_id, set_id=set_id)
    return PricingResponse(
        card_id=result.card_id,
        pricing=result.pricing,
        from_cache=result.from_cache,
        cache_age=result.cache_age,
        is_stale=result.is_stale,
    )
