import logging
from typing import Any

import httpx

from pokeprice.models.failure import UpstreamError

logger = logging.getLogger(__name__)


async def get_json(
    service: str,
    url: str,
    *,
    headers: dict[str, str],
    params: dict[str, Any] | None = None,
    timeout: float,
) -> Any:
    """
    GET a JSON document, converting failures to UpstreamError.

    Raises:
        UpstreamError: On transport failure or any non-2xx response. The
            error message carries the response body when it could be read.
    """
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.get(url, headers=headers, params=params)
    except httpx.HTTPError as e:
        logger.warning("%s request to %s failed: %s", service, url, e)
        raise UpstreamError(service, None, str(e)) from e

    if not response.is_success:
        body = response.text or None
        logger.warning("%s returned %d for %s", service, response.status_code, url)
        raise UpstreamError(service, response.status_code, body)

    try:
        return response.json()
    except ValueError as e:
        raise UpstreamError(service, response.status_code, "Response was not valid JSON") from e
