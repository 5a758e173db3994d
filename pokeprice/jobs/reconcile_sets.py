"""
Build the set mapping file.

Fetches the set lists of both upstream APIs, reconciles them, and writes
the mapping the data service uses for card image URLs. Run after a new
set is released, or whenever unmapped sets show up in the report.
"""

import asyncio
import logging
from pathlib import Path

from pokeprice.clients.pokedata import PokeDataClient
from pokeprice.clients.pokemon_tcg import PokemonTcgClient
from pokeprice.clients.retry import retry_with_backoff
from pokeprice.models.mapping import MappingResult
from pokeprice.services.set_reconciler import MatchParams, reconcile, write_mapping_file

logger = logging.getLogger(__name__)


async def run_reconcile(
    output_path: Path | None = None,
    tcg_client: PokemonTcgClient | None = None,
    pokedata_client: PokeDataClient | None = None,
) -> MappingResult:
    """
    Reconcile Pokemon TCG sets against PokeData sets and persist the result.

    Args:
        output_path: Mapping file destination. Defaults to settings.set_mapping_path.
        tcg_client: Pokemon TCG API client
        pokedata_client: PokeData client

    Returns:
        The reconciliation result that was written.

    Raises:
        UpstreamError: If either set list can't be fetched after retries
    """
    tcg_client = tcg_client or PokemonTcgClient()
    pokedata_client = pokedata_client or PokeDataClient()

    logger.info("Fetching set lists...")
    tcg_sets = await retry_with_backoff(tcg_client.get_sets)
    pokedata_sets = await retry_with_backoff(pokedata_client.get_sets)
    logger.info("Fetched %d TCG sets and %d PokeData sets", len(tcg_sets), len(pokedata_sets))

    result = reconcile(tcg_sets, pokedata_sets, params=MatchParams.from_settings())
    path = write_mapping_file(result, output_path)

    for strategy, count in result.strategy_counts().items():
        logger.info("  %s: %d", strategy, count)
    for unmapped in result.unmapped_external:
        logger.info("Unmapped TCG set: %s (%s)", unmapped.id, unmapped.name)

    logger.info("Reconciliation complete: %d mappings written to %s", len(result.mappings), path)
    return result


def main() -> None:
    """CLI entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(run_reconcile())


if __name__ == "__main__":
    main()
