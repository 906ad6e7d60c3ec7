"""Bounded exponential-backoff retry for a single upstream call."""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Awaitable, Callable, Optional, TypeVar

from ..agents.idea_validation.errors import RetryableUpstreamError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def backoff_delay(attempt: int, base_delay: float, jitter: float = 0.0) -> float:
    """Delay before retry number *attempt* (0-based): base * 2**attempt + jitter."""
    return base_delay * (2 ** attempt) + jitter


async def call_with_retry(
    fn: Callable[[], Awaitable[T]],
    max_attempts: int,
    base_delay: float,
    *,
    max_jitter: float = 1.0,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    rand: Callable[[], float] = random.random,
    label: Optional[str] = None,
) -> T:
    """Await ``fn()`` and retry it on rate-limit / overload errors.

    Only RetryableUpstreamError triggers a retry; every other exception
    propagates at once. After ``max_attempts`` calls the last retryable
    error is re-raised for the caller to handle.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    tag = label or "upstream"
    attempt = 0
    while True:
        try:
            return await fn()
        except RetryableUpstreamError as exc:
            if attempt + 1 >= max_attempts:
                logger.error(
                    "[RETRY] %s: giving up after %d attempt(s): %s", tag, attempt + 1, exc
                )
                raise
            delay = backoff_delay(attempt, base_delay, rand() * max_jitter)
            logger.warning(
                "[RETRY] %s: %s, retrying in %.2fs (attempt %d/%d)",
                tag, exc, delay, attempt + 1, max_attempts,
            )
            await sleep(delay)
            attempt += 1
