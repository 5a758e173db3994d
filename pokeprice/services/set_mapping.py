"""
Runtime lookup over the reconciled set mapping file.

"No mapping" is a normal outcome here: every lookup returns None rather
than raising, and a missing or unreadable file yields an empty table.
"""

import logging
from pathlib import Path

from pokeprice.config import settings
from pokeprice.models.mapping import SetMappingEntry
from pokeprice.services.set_reconciler import load_mapping_file

logger = logging.getLogger(__name__)


class SetMappingTable:
    """TCG set id <-> PokeData set id lookups."""

    def __init__(self, entries: dict[str, SetMappingEntry] | None = None) -> None:
        self._entries = dict(entries or {})
        self._by_internal_id: dict[int, SetMappingEntry] = {}
        for entry in self._entries.values():
            if entry.internal_set_id is not None:
                self._by_internal_id.setdefault(entry.internal_set_id, entry)

    @classmethod
    def load(cls, path: Path | None = None) -> "SetMappingTable":
        """Load the table from disk, or return an empty one if unavailable."""
        if path is None:
            path = settings.set_mapping_path

        try:
            entries = load_mapping_file(path)
        except FileNotFoundError:
            logger.warning("Set mapping file not found at %s; images will not be enhanced", path)
            return cls()
        except (KeyError, ValueError) as e:
            logger.error("Could not read set mapping file %s: %s", path, e)
            return cls()

        logger.info("Loaded %d set mappings from %s", len(entries), path)
        return cls(entries)

    def get(self, external_set_id: str) -> SetMappingEntry | None:
        return self._entries.get(external_set_id)

    def get_by_internal_id(self, internal_set_id: int) -> SetMappingEntry | None:
        return self._by_internal_id.get(internal_set_id)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, external_set_id: object) -> bool:
        return external_set_id in self._entries
