"""
Set API endpoints.

Lists sets, optionally grouped by expansion, and looks up a single set.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from pokeprice.api.dependencies import get_data_service
from pokeprice.models.failure import SetNotFoundError
from pokeprice.models.set import PokemonSet
from pokeprice.services.data_service import DataService
from pokeprice.services.expansion import group_sets_by_expansion, prepare_grouped_sets

router = APIRouter(prefix="/sets", tags=["sets"])


class SetResponse(BaseModel):
    """Response model for a single set."""

    id: int
    name: str
    code: str | None = None
    language: str = "ENGLISH"
    release_date: str | None = None
    series_expansion: str | None = None

    @classmethod
    def from_set(cls, pokemon_set: PokemonSet) -> "SetResponse":
        return cls.model_validate(pokemon_set.to_dict())


class SetListResponse(BaseModel):
    """Response model for the flat set list."""

    sets: list[SetResponse]
    count: int


class ExpansionGroupResponse(BaseModel):
    """One expansion and its sets, newest first."""

    type: str = "group"
    label: str
    items: list[SetResponse] = Field(default_factory=list)


class GroupedSetListResponse(BaseModel):
    """Response model for the set list grouped by expansion."""

    groups: list[ExpansionGroupResponse]
    count: int


@router.get("", response_model=SetListResponse | GroupedSetListResponse)
async def list_sets(
    service: Annotated[DataService, Depends(get_data_service)],
    group_by_expansion: bool = False,
    force_refresh: bool = False,
) -> SetListResponse | GroupedSetListResponse:
    """
    Get all sets, newest first.

    With group_by_expansion, sets are grouped under expansion labels in a
    fixed priority order (newest era first, "Other" last).
    """
    sets = await service.get_set_list(force_refresh=force_refresh)

    if not group_by_expansion:
        return SetListResponse(sets=[SetResponse.from_set(s) for s in sets], count=len(sets))

    groups = prepare_grouped_sets(group_sets_by_expansion(sets))
    return GroupedSetListResponse(
        groups=[
            ExpansionGroupResponse(
                label=group.label,
                items=[SetResponse.from_set(s) for s in group.items],
            )
            for group in groups
        ],
        count=len(sets),
    )


@router.get("/{set_id}", response_model=SetResponse)
async def get_set(
    set_id: int,
    service: Annotated[DataService, Depends(get_data_service)],
) -> SetResponse:
    """Get one set by its id."""
    for pokemon_set in await service.get_set_list():
        if pokemon_set.id == set_id:
            return SetResponse.from_set(pokemon_set)

    raise SetNotFoundError(set_id)
