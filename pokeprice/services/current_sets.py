"""
Current-sets configuration.

Sets from the active expansion still receive new cards and price movement,
so their cached card lists are revalidated periodically instead of being
kept forever. The configuration is an immutable snapshot: updates return a
new object, and the data service swaps its reference.
"""

from calendar import monthrange
from dataclasses import dataclass, replace
from datetime import UTC, date, datetime
from typing import Any

from pokeprice.models.set import PokemonSet
from pokeprice.services.expansion import classify

BASELINE_CURRENT_SET_CODES = frozenset(
    {
        "JOT",
        "PRE",
        "SSP",
        "SCR",
        "SFA",
        "TWM",
        "TEF",
        "PAF",
        "PAR",
        "MEW",
        "OBF",
        "PAL",
        "SVE",
        "SVI",
        "SVP",
    }
)


def subtract_months(day: date, months: int) -> date:
    """Same day-of-month `months` earlier, clamped to the end of short months."""
    year, month = divmod(day.year * 12 + (day.month - 1) - months, 12)
    month += 1
    return date(year, month, min(day.day, monthrange(year, month)[1]))


@dataclass(frozen=True, slots=True)
class CurrentSetsConfig:
    """
    Which set codes count as "current".

    Attributes:
        current_set_codes: Codes whose card lists are periodically revalidated
        current_expansion: Expansion label that defines "current"
        max_age_months: Sets released longer ago than this are not current
        last_updated: When the codes were last derived from live set data
    """

    current_set_codes: frozenset[str] = BASELINE_CURRENT_SET_CODES
    current_expansion: str = "Scarlet & Violet"
    max_age_months: int = 24
    last_updated: datetime | None = None

    def is_current(self, set_code: str | None) -> bool:
        return bool(set_code) and set_code in self.current_set_codes

    def updated_from_sets(
        self,
        sets: list[PokemonSet],
        today: date | None = None,
    ) -> "CurrentSetsConfig":
        """
        Derive a new snapshot from a fresh set list.

        A set qualifies if it belongs to the current expansion, has a code,
        and was released within max_age_months (sets without a parseable
        date qualify). Returns self unchanged if no set qualifies.
        """
        if today is None:
            today = datetime.now(UTC).date()
        cutoff = subtract_months(today, self.max_age_months)

        codes: set[str] = set()
        for s in sets:
            if not s.code:
                continue
            expansion = s.series_expansion or classify(s)
            if expansion != self.current_expansion and self.current_expansion not in s.name:
                continue
            released = s.released
            if released is not None and released < cutoff:
                continue
            codes.add(s.code)

        if not codes:
            return self

        return replace(
            self,
            current_set_codes=frozenset(codes),
            last_updated=datetime.combine(today, datetime.min.time(), tzinfo=UTC),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "current_set_codes": sorted(self.current_set_codes),
            "current_expansion": self.current_expansion,
            "max_age_months": self.max_age_months,
            "last_updated": self.last_updated.isoformat() if self.last_updated else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CurrentSetsConfig":
        codes = data.get("current_set_codes") or BASELINE_CURRENT_SET_CODES
        last_updated = data.get("last_updated")
        return cls(
            current_set_codes=frozenset(codes),
            current_expansion=data.get("current_expansion") or "Scarlet & Violet",
            max_age_months=int(data.get("max_age_months") or 24),
            last_updated=datetime.fromisoformat(last_updated) if last_updated else None,
        )


DEFAULT_CURRENT_SETS = CurrentSetsConfig()
