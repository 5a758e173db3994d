from dataclasses import asdict, dataclass, replace
from datetime import date, datetime
from email.utils import parsedate_to_datetime
from typing import Any

# Upstream date formats seen in the wild: "2025/01/17" (Pokemon TCG API),
# "Fri, 17 Jan 2025 00:00:00 GMT" (PokeData), plus plain ISO dates.
_DATE_FORMATS = ("%Y-%m-%d", "%Y/%m/%d", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%dT%H:%M:%S.%fZ")


def parse_release_date(value: str | None) -> date | None:
    """
    Parse a release date string from either upstream API.

    Returns None for empty or unparseable values.
    """
    if not value:
        return None

    text = value.strip()
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    try:
        return parsedate_to_datetime(text).date()
    except (TypeError, ValueError, IndexError):
        return None


@dataclass(frozen=True, slots=True)
class PokemonSet:
    """
    A card set as presented to clients.

    Attributes:
        id: Stable internal (PokeData) set id. Authoritative identity.
        code: Short set code (e.g., "PRE"). May be None or shared.
        name: Display name
        language: Set language (PokeData uses "ENGLISH", "JAPANESE", ...)
        release_date: Release date string as delivered upstream
        series_expansion: Expansion grouping label, when classified
    """

    id: int | None
    name: str
    code: str | None = None
    language: str = "ENGLISH"
    release_date: str | None = None
    series_expansion: str | None = None

    @property
    def released(self) -> date | None:
        return parse_release_date(self.release_date)

    def with_id(self, set_id: int) -> "PokemonSet":
        return replace(self, id=set_id)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PokemonSet":
        return cls(
            id=_to_int(data.get("id")),
            name=str(data.get("name") or ""),
            code=data.get("code") or None,
            language=str(data.get("language") or "ENGLISH"),
            release_date=data.get("release_date") or data.get("releaseDate"),
            series_expansion=data.get("series_expansion"),
        )


def _to_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def is_synthesized_id(set_id: int) -> bool:
    """True for ids made up by ensure_set_ids; PokeData knows nothing about them."""
    return set_id < 0


def ensure_set_ids(sets: list[PokemonSet]) -> list[PokemonSet]:
    """
    Guarantee every set has a non-null id.

    Sets without an id get sequential negative ids (-1, -2, ...) below any
    already synthesized, so they stay unique across the list and can never
    collide with a PokeData id.
    """
    lowest = min((s.id for s in sets if s.id is not None and s.id < 0), default=0)

    result: list[PokemonSet] = []
    for s in sets:
        if s.id is None:
            lowest -= 1
            s = s.with_id(lowest)
        result.append(s)
    return result


def sort_sets_by_release_date(sets: list[PokemonSet]) -> list[PokemonSet]:
    """Sort sets newest first. Sets without a parseable date go last."""
    return sorted(sets, key=lambda s: s.released or date.min, reverse=True)
