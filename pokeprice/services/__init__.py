"""
PokePrice services.

Set reconciliation, expansion grouping, and cache-or-fetch orchestration.
"""

from pokeprice.services.current_sets import (
    BASELINE_CURRENT_SET_CODES,
    DEFAULT_CURRENT_SETS,
    CurrentSetsConfig,
)
from pokeprice.services.data_service import (
    DataService,
    RefreshStatus,
    card_image_urls,
    create_data_service,
    load_current_sets,
    load_fallback_sets,
)
from pokeprice.services.expansion import (
    FALLBACK_EXPANSION,
    ExpansionGroup,
    classify,
    group_sets_by_expansion,
    prepare_grouped_sets,
)
from pokeprice.services.set_mapping import SetMappingTable
from pokeprice.services.set_reconciler import (
    MANUAL_MAPPINGS,
    MatchParams,
    load_mapping_file,
    reconcile,
    write_mapping_file,
)

__all__ = [
    "BASELINE_CURRENT_SET_CODES",
    "CurrentSetsConfig",
    "DEFAULT_CURRENT_SETS",
    "DataService",
    "ExpansionGroup",
    "FALLBACK_EXPANSION",
    "MANUAL_MAPPINGS",
    "MatchParams",
    "RefreshStatus",
    "SetMappingTable",
    "card_image_urls",
    "classify",
    "create_data_service",
    "group_sets_by_expansion",
    "load_current_sets",
    "load_fallback_sets",
    "load_mapping_file",
    "prepare_grouped_sets",
    "reconcile",
    "write_mapping_file",
]
