import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from pokeprice.models.failure import UpstreamError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def retry_with_backoff(
    fn: Callable[[], Awaitable[T]],
    attempts: int = 3,
    delay: float = 1.0,
) -> T:
    """
    Call fn, retrying on UpstreamError with linear backoff.

    Waits delay, 2*delay, 3*delay... between attempts. Used by batch jobs;
    request-path code never retries.

    Raises:
        UpstreamError: The last error once attempts are exhausted
        ValueError: If attempts < 1
    """
    if attempts < 1:
        raise ValueError("attempts must be at least 1")

    for attempt in range(1, attempts + 1):
        try:
            return await fn()
        except UpstreamError as e:
            if attempt == attempts:
                raise
            wait = delay * attempt
            logger.warning(
                "Attempt %d/%d failed (%s), retrying in %.1fs", attempt, attempts, e, wait
            )
            await asyncio.sleep(wait)

    raise AssertionError("unreachable")
