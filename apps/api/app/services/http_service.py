"""HTTP helpers with retry/backoff for outbound integrations."""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_RETRY_STATUSES = {429, 500, 502, 503, 504}


def backoff_delay(attempt: int, base_delay: float, max_delay: float) -> float:
    """Exponential backoff with up to 50% jitter."""
    delay = min(max_delay, base_delay * (2**attempt))
    if delay:
        delay = delay + random.uniform(0, delay / 2)
    return delay


async def post_json_with_retries(
    client: httpx.AsyncClient,
    url: str,
    *,
    json: dict[str, Any],
    headers: dict[str, str] | None = None,
    max_attempts: int = 3,
    base_delay: float = 0.5,
    max_delay: float = 4.0,
    retry_statuses: set[int] | None = None,
) -> httpx.Response:
    """
    POST a JSON body, retrying transport errors and retryable statuses.

    The last response is returned as-is once attempts run out; transport
    errors on the final attempt propagate.
    """
    statuses = retry_statuses or DEFAULT_RETRY_STATUSES

    for attempt in range(max_attempts):
        last_attempt = attempt >= max_attempts - 1
        try:
            response = await client.post(url, json=json, headers=headers)
        except httpx.RequestError as exc:
            if last_attempt:
                raise
            logger.warning("POST %s failed, retrying", url, exc_info=exc)
            await asyncio.sleep(backoff_delay(attempt, base_delay, max_delay))
            continue

        if response.status_code in statuses and not last_attempt:
            logger.warning("POST %s returned %s, retrying", url, response.status_code)
            await asyncio.sleep(backoff_delay(attempt, base_delay, max_delay))
            continue

        return response

    return response
