"""
Set reconciliation.

Links Pokemon TCG API sets (card images, ids like "sv8pt5") to PokeData sets
(pricing, integer ids). The two APIs key sets independently, so matching is
a cascade of heuristics tried in order of confidence for each TCG set:

1. Manual override table
2. PTCGO code == PokeData code (case-sensitive)
3. Normalized name equality
4. Name similarity with release dates close together
5. Equality after stripping series prefix / "base" suffix

Runs in batch (see pokeprice.jobs.reconcile_sets). The result is written to
a JSON mapping file that the data service reads at startup.
"""

import json
import logging
import re
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pokeprice.config import settings
from pokeprice.models.mapping import MappingResult, MatchType, SetMappingEntry, UnmappedSet
from pokeprice.models.set import PokemonSet, parse_release_date
from pokeprice.parsers.responses import TcgSetRecord

logger = logging.getLogger(__name__)

# TCG set id -> PokeData code, for sets automatic matching gets wrong
# (abbreviation collisions, renamed sets, subsets like "sv8pt5").
MANUAL_MAPPINGS: dict[str, str] = {
    "sv9": "JTG",
    "sv8pt5": "PRE",
    "sv8": "SSP",
    "sv7": "SCR",
    "sv6pt5": "SFA",
    "sv6": "TWM",
    "sv5": "TEF",
    "sv4pt5": "PAF",
    "sv4": "PAR",
    "sv3pt5": "MEW",
    "sv3": "OBF",
    "sv2": "PAL",
    "sv1": "SVI",
}

_NON_WORD = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")
_SERIES_PREFIX = re.compile(r"^(ex|xy|sm|swsh|sv)\s+")
_GENERIC_SUFFIX = re.compile(r"\s+(base|set)$")


@dataclass(frozen=True, slots=True)
class MatchParams:
    """Thresholds for the name-similarity + date-proximity strategy."""

    max_date_delta_days: int = 90
    min_shared_words: int = 2
    min_word_length: int = 3

    @classmethod
    def from_settings(cls) -> "MatchParams":
        return cls(
            max_date_delta_days=settings.reconcile_max_date_delta_days,
            min_shared_words=settings.reconcile_min_shared_words,
            min_word_length=settings.reconcile_min_word_length,
        )


def normalize_name(name: str) -> str:
    """Lowercase, drop punctuation, collapse whitespace."""
    text = _NON_WORD.sub("", name.lower())
    return _WHITESPACE.sub(" ", text).strip()


def clean_name(name: str) -> str:
    """Normalize, then strip a leading series token and trailing "base"/"set"."""
    text = _SERIES_PREFIX.sub("", normalize_name(name))
    return _GENERIC_SUFFIX.sub("", text).strip()


def _names_similar(a: str, b: str, params: MatchParams) -> bool:
    if not a or not b:
        return False
    if a in b or b in a:
        return True

    shared = [w for w in a.split() if len(w) >= params.min_word_length and w in b]
    return len(shared) >= params.min_shared_words


def _entry(tcg_set: TcgSetRecord, target: PokemonSet, match_type: MatchType) -> SetMappingEntry:
    return SetMappingEntry(
        external_set_id=tcg_set.id,
        internal_set_code=target.code,
        internal_set_id=target.id,
        match_type=match_type,
        external_name=tcg_set.name,
        internal_name=target.name,
    )


class _Matcher:
    """Indexes the English PokeData sets once for the whole run."""

    def __init__(self, pokedata_sets: list[PokemonSet], params: MatchParams) -> None:
        self.sets = pokedata_sets
        self.params = params
        self.by_code: dict[str, PokemonSet] = {}
        self.by_name: dict[str, PokemonSet] = {}
        self.by_cleaned_name: dict[str, PokemonSet] = {}

        for s in pokedata_sets:
            if s.code:
                self.by_code.setdefault(s.code, s)
            normalized = normalize_name(s.name)
            if normalized:
                self.by_name.setdefault(normalized, s)
            cleaned = clean_name(s.name)
            if cleaned:
                self.by_cleaned_name.setdefault(cleaned, s)

    def manual(self, tcg_set: TcgSetRecord, code: str) -> SetMappingEntry | None:
        target = self.by_code.get(code)
        if target is None:
            logger.warning(
                "Manual mapping %s -> %s failed: no English PokeData set has that code",
                tcg_set.id,
                code,
            )
            return None
        return _entry(tcg_set, target, MatchType.MANUAL)

    def automatic(self, tcg_set: TcgSetRecord) -> SetMappingEntry | None:
        if tcg_set.ptcgo_code and tcg_set.ptcgo_code in self.by_code:
            return _entry(tcg_set, self.by_code[tcg_set.ptcgo_code], MatchType.PTCGO_CODE)

        normalized = normalize_name(tcg_set.name)
        if normalized in self.by_name:
            return _entry(tcg_set, self.by_name[normalized], MatchType.EXACT_NAME)

        closest = self._closest_similar(tcg_set, normalized)
        if closest is not None:
            return _entry(tcg_set, closest, MatchType.NAME_DATE_SIMILARITY)

        cleaned = clean_name(tcg_set.name)
        if cleaned and cleaned in self.by_cleaned_name:
            return _entry(tcg_set, self.by_cleaned_name[cleaned], MatchType.CLEANED_NAME)

        return None

    def _closest_similar(self, tcg_set: TcgSetRecord, normalized: str) -> PokemonSet | None:
        released = parse_release_date(tcg_set.release_date)
        if released is None:
            return None

        best: PokemonSet | None = None
        best_delta = self.params.max_date_delta_days + 1
        for candidate in self.sets:
            if not _names_similar(normalized, normalize_name(candidate.name), self.params):
                continue
            candidate_date = candidate.released
            if candidate_date is None:
                continue
            delta = abs((released - candidate_date).days)
            if delta < best_delta:
                best, best_delta = candidate, delta

        return best


def reconcile(
    tcg_sets: list[TcgSetRecord],
    pokedata_sets: list[PokemonSet],
    manual: dict[str, str] | None = None,
    params: MatchParams | None = None,
) -> MappingResult:
    """
    Map each TCG set to at most one English PokeData set.

    Args:
        tcg_sets: Sets from the Pokemon TCG API
        pokedata_sets: Sets from PokeData; non-English entries are ignored
        manual: Override table. Defaults to MANUAL_MAPPINGS.
        params: Similarity thresholds. Defaults to MatchParams().

    Returns:
        Mappings keyed by TCG set id, plus unmatched sets from both sides.
        Manual overrides win over automatic strategies whenever their code
        resolves; an override whose code is unknown to PokeData falls
        through to automatic matching.
    """
    if manual is None:
        manual = MANUAL_MAPPINGS
    if params is None:
        params = MatchParams()

    english = [s for s in pokedata_sets if s.language == "ENGLISH"]
    matcher = _Matcher(english, params)
    result = MappingResult()

    for tcg_set in tcg_sets:
        if tcg_set.id in result.mappings:
            continue

        entry = None
        if tcg_set.id in manual:
            entry = matcher.manual(tcg_set, manual[tcg_set.id])
        if entry is None:
            entry = matcher.automatic(tcg_set)
        if entry is None:
            result.unmapped_external.append(
                UnmappedSet(
                    id=tcg_set.id,
                    name=tcg_set.name,
                    code=tcg_set.ptcgo_code,
                    release_date=tcg_set.release_date,
                )
            )
        else:
            result.mappings[tcg_set.id] = entry

    mapped_ids = {e.internal_set_id for e in result.mappings.values()}
    for s in english:
        if s.id is None or s.id not in mapped_ids:
            result.unmapped_internal.append(
                UnmappedSet(
                    id="" if s.id is None else str(s.id),
                    name=s.name,
                    code=s.code,
                    release_date=s.release_date,
                )
            )

    logger.info(
        "Reconciled %d of %d TCG sets (%d PokeData sets unmapped)",
        len(result.mappings),
        len(tcg_sets),
        len(result.unmapped_internal),
    )
    return result


def mapping_document(result: MappingResult, generated: datetime | None = None) -> dict[str, Any]:
    """Build the JSON document persisted by write_mapping_file."""
    if generated is None:
        generated = datetime.now(UTC)

    return {
        "metadata": {
            "generated": generated.isoformat(),
            "totalMappings": len(result.mappings),
            "unmappedTcg": len(result.unmapped_external),
            "unmappedPokeData": len(result.unmapped_internal),
            "mappingStrategies": result.strategy_counts(),
        },
        "mappings": {
            external_id: entry.to_dict() for external_id, entry in result.mappings.items()
        },
        "unmapped": {
            "pokemonTcg": [s.to_dict() for s in result.unmapped_external],
            "pokeData": [s.to_dict() for s in result.unmapped_internal],
        },
    }


def write_mapping_file(result: MappingResult, path: Path | None = None) -> Path:
    """
    Persist a reconciliation result as JSON.

    Args:
        result: Output of reconcile()
        path: Destination. Defaults to settings.set_mapping_path.

    Returns:
        Path written.
    """
    if path is None:
        path = settings.set_mapping_path

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(mapping_document(result), f, indent=2)

    logger.info("Wrote %d set mappings to %s", len(result.mappings), path)
    return path


def load_mapping_file(path: Path | None = None) -> dict[str, SetMappingEntry]:
    """
    Load mappings written by write_mapping_file.

    Returns:
        TCG set id -> mapping entry

    Raises:
        FileNotFoundError: If the mapping file doesn't exist
        ValueError: If the file is not a valid mapping document
    """
    if path is None:
        path = settings.set_mapping_path

    with open(path, encoding="utf-8") as f:
        document = json.load(f)

    if not isinstance(document, dict) or not isinstance(document.get("mappings"), dict):
        raise ValueError(f"Invalid set mapping file: {path}")

    return {
        external_id: SetMappingEntry.from_dict(external_id, data)
        for external_id, data in document["mappings"].items()
    }
