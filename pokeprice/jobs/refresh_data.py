"""
Scheduled job to refresh cached set and card data.

Force-refreshes the set list (which also updates the current-sets
snapshot) and re-warms the card cache for current sets. Can be run as a
standalone script or called from a scheduler.
"""

import asyncio
import logging

from pokeprice.cache.database import DatabaseCacheStore
from pokeprice.clients.retry import retry_with_backoff
from pokeprice.db.database import async_session_factory, dispose_db, init_db
from pokeprice.services.data_service import DataService, create_data_service

logger = logging.getLogger(__name__)


async def refresh(service: DataService) -> dict[str, int]:
    """
    Refresh the set list and preload current sets' cards.

    Returns:
        Counts of sets fetched, current sets preloaded, and cards cached

    Raises:
        UpstreamError: If the set list can't be fetched after retries
    """
    sets = await retry_with_backoff(service.refresh_set_list)
    logger.info("Refreshed %d sets", len(sets))

    loaded = await service.preload_current_sets(force_refresh=True)
    total_cards = sum(loaded.values())
    logger.info("Refreshed %d cards across %d current sets", total_cards, len(loaded))

    return {"sets": len(sets), "current_sets": len(loaded), "cards": total_cards}


async def run_refresh() -> dict[str, int]:
    """Refresh against the configured database cache."""
    await init_db()
    try:
        service = await create_data_service(DatabaseCacheStore(async_session_factory))
        return await refresh(service)
    finally:
        await dispose_db()


def main() -> None:
    """CLI entry point for running the data refresh."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(run_refresh())


if __name__ == "__main__":
    main()
