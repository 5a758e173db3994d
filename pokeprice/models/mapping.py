"""
Set mapping models.

A mapping links a Pokemon TCG API set id (e.g. "sv8pt5") to the PokeData
set it corresponds to. Mappings are produced in batch by the set reconciler
and read at lookup time.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any


class MatchType(str, Enum):
    """How a mapping was established, in decreasing order of confidence."""

    MANUAL = "manual"
    PTCGO_CODE = "ptcgo_code"
    EXACT_NAME = "exact_name"
    NAME_DATE_SIMILARITY = "name_date_similarity"
    CLEANED_NAME = "cleaned_name"


@dataclass(frozen=True, slots=True)
class SetMappingEntry:
    """One external -> internal set mapping."""

    external_set_id: str
    internal_set_code: str | None
    internal_set_id: int | None
    match_type: MatchType
    external_name: str = ""
    internal_name: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "pokeDataCode": self.internal_set_code,
            "pokeDataId": self.internal_set_id,
            "tcgName": self.external_name,
            "pokeDataName": self.internal_name,
            "matchType": self.match_type.value,
        }

    @classmethod
    def from_dict(cls, external_set_id: str, data: dict[str, Any]) -> "SetMappingEntry":
        return cls(
            external_set_id=external_set_id,
            internal_set_code=data.get("pokeDataCode"),
            internal_set_id=data.get("pokeDataId"),
            match_type=MatchType(data["matchType"]),
            external_name=data.get("tcgName") or "",
            internal_name=data.get("pokeDataName") or "",
        )


@dataclass(frozen=True, slots=True)
class UnmappedSet:
    """A set that no strategy could match, kept for audit."""

    id: str
    name: str
    code: str | None = None
    release_date: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class MappingResult:
    """
    Output of a reconciliation run.

    Invariant: at most one entry per external set id (dict keyed by it).
    """

    mappings: dict[str, SetMappingEntry] = field(default_factory=dict)
    unmapped_external: list[UnmappedSet] = field(default_factory=list)
    unmapped_internal: list[UnmappedSet] = field(default_factory=list)

    def strategy_counts(self) -> dict[str, int]:
        """Count of mappings contributed by each strategy."""
        counts = {match_type.value: 0 for match_type in MatchType}
        for entry in self.mappings.values():
            counts[entry.match_type.value] += 1
        return counts
