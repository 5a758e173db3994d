"""
Upstream response normalization.

Both upstream APIs have shipped several response shapes over time: a bare
array, or the array wrapped in "data", "cards", "results" or "sets".
Each endpoint declares the envelope it accepts once, here, and records are
validated with pydantic models so contract drift is isolated to this module.

Anything unrecognized normalizes to an empty result rather than an error.
"""

import logging
from dataclasses import dataclass
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from pokeprice.models.card import Card
from pokeprice.models.set import PokemonSet

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


@dataclass(frozen=True, slots=True)
class Envelope:
    """
    Accepted response shapes for one endpoint.

    Attributes:
        name: Endpoint label used in log messages
        keys: Wrapper keys that may hold the item array, tried in order
    """

    name: str
    keys: tuple[str, ...]


POKEDATA_SETS = Envelope("pokedata /sets", ("data", "sets"))
POKEDATA_SET_CARDS = Envelope("pokedata /set", ("cards", "data", "results"))
POKEMON_TCG_SETS = Envelope("pokemontcg /sets", ("data",))


def extract_items(payload: Any, envelope: Envelope) -> list[dict[str, Any]]:
    """
    Pull the item array out of a response payload.

    Args:
        payload: Decoded JSON body
        envelope: Shapes accepted for this endpoint

    Returns:
        The item dicts, or an empty list if no accepted shape matched.
    """
    items: Any = None

    if isinstance(payload, list):
        items = payload
    elif isinstance(payload, dict):
        for key in envelope.keys:
            if isinstance(payload.get(key), list):
                items = payload[key]
                break

    if items is None:
        logger.warning("Unrecognized response shape from %s", envelope.name)
        return []

    return [item for item in items if isinstance(item, dict)]


def parse_records(items: list[dict[str, Any]], model: type[RecordT]) -> list[RecordT]:
    """Validate each item against model, skipping (and logging) invalid ones."""
    records: list[RecordT] = []
    for item in items:
        try:
            records.append(model.model_validate(item))
        except ValidationError as e:
            logger.warning("Skipping malformed %s: %s", model.__name__, e.errors()[0]["msg"])
    return records


# --- PokeData records ---


class PokeDataSetRecord(BaseModel):
    """A set as returned by PokeData /sets."""

    model_config = ConfigDict(extra="ignore")

    id: int
    name: str
    code: str | None = None
    language: str = "ENGLISH"
    release_date: str | None = None

    def to_set(self) -> PokemonSet:
        return PokemonSet(
            id=self.id,
            name=self.name,
            code=self.code or None,
            language=self.language,
            release_date=self.release_date,
        )


class PokeDataCardRecord(BaseModel):
    """A card as returned inside PokeData /set."""

    model_config = ConfigDict(extra="ignore")

    id: int
    name: str
    num: str = ""
    set_id: int
    set_code: str | None = None
    set_name: str | None = None
    secret: bool = False
    language: str = "ENGLISH"
    release_date: str | None = None

    @field_validator("num", mode="before")
    @classmethod
    def _stringify_number(cls, value: Any) -> str:
        return "" if value is None else str(value)

    def to_card(self, pricing: dict[str, Any] | None = None) -> Card:
        return Card(
            id=str(self.id),
            set_id=self.set_id,
            name=self.name,
            card_number=self.num,
            set_code=self.set_code or None,
            set_name=self.set_name,
            pricing=pricing or {},
        )


# --- Pokemon TCG API records ---


class TcgSetRecord(BaseModel):
    """A set as returned by the Pokemon TCG API /sets."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str
    name: str
    series: str | None = None
    ptcgo_code: str | None = Field(default=None, alias="ptcgoCode")
    release_date: str | None = Field(default=None, alias="releaseDate")


# --- Pricing ---

PSA_GRADES = [f"{grade}.0" for grade in range(1, 11)]
CGC_GRADES = [f"{grade}.0" for grade in range(1, 8)] + [
    "7.5",
    "8.0",
    "8.5",
    "9.0",
    "9.5",
    "10.0",
]
RAW_SOURCES = {
    "TCGPlayer": "tcgPlayer",
    "eBay Raw": "ebayRaw",
    "Pokedata Raw": "pokeDataRaw",
}


def unwrap_pricing(payload: Any) -> dict[str, Any]:
    """Unwrap an optional "data" envelope around a pricing object."""
    if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
        return payload["data"]
    return payload if isinstance(payload, dict) else {}


def _price_value(pricing: dict[str, Any], key: str) -> float | None:
    entry = pricing.get(key)
    if not isinstance(entry, dict):
        return None
    value = entry.get("value")
    if isinstance(value, int | float) and value > 0:
        return float(value)
    return None


def transform_pokedata_pricing(payload: Any) -> dict[str, Any]:
    """
    Flatten PokeData's pricing map into source -> amount.

    PokeData keys look like "PSA 10.0", "CGC 9.5", "eBay Raw", each holding
    {"currency", "value"}. Graded prices nest under "psa" / "cgc" keyed by
    grade ("10", "9_5"). Zero and missing values are dropped.
    """
    raw = unwrap_pricing(payload).get("pricing")
    if not isinstance(raw, dict):
        return {}

    result: dict[str, Any] = {}

    psa: dict[str, float] = {}
    for grade in PSA_GRADES:
        value = _price_value(raw, f"PSA {grade}")
        if value is not None:
            psa[grade.split(".")[0]] = value
    if psa:
        result["psa"] = psa

    cgc: dict[str, float] = {}
    for grade in CGC_GRADES:
        value = _price_value(raw, f"CGC {grade}")
        if value is not None:
            cgc[grade.replace(".", "_")] = value
    if cgc:
        result["cgc"] = cgc

    for source, field_name in RAW_SOURCES.items():
        value = _price_value(raw, source)
        if value is not None:
            result[field_name] = value

    return result
