from __future__ import annotations
import asyncio
import logging
from typing import Awaitable, Callable, Optional

from gemchat.providers.base import ProviderError, RetriesExhaustedError, TextProvider

logger = logging.getLogger(__name__)

# Overloaded and rate limited
RETRYABLE_STATUSES = (503, 429)


async def generate_with_retry(
    provider: TextProvider,
    prompt: str,
    max_attempts: int = 3,
    base_delay: float = 1.0,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> str:
    """Call ``provider.generate`` with exponential backoff on 503/429.

    The delay before attempt ``n + 1`` is ``base_delay * 2 ** (n - 1)``.
    Any other ProviderError propagates on the spot. When every attempt hits a
    retryable status, RetriesExhaustedError is raised with the last status.
    """
    last_error: Optional[ProviderError] = None
    for attempt in range(1, max_attempts + 1):
        try:
            return await provider.generate(prompt)
        except ProviderError as e:
            if e.status not in RETRYABLE_STATUSES:
                raise
            last_error = e
            logger.warning(
                "provider=%s attempt %d/%d failed status=%s", provider.id, attempt, max_attempts, e.status
            )
            if attempt < max_attempts:
                delay = base_delay * 2 ** (attempt - 1)
                logger.info("Retrying in %.2fs", delay)
                await sleep(delay)

    status = last_error.status if last_error else None
    raise RetriesExhaustedError(
        f"provider {provider.id} failed after {max_attempts} attempts: {last_error}",
        status=status,
        attempts=max_attempts,
    ) from last_error
