"""Shared httpx.AsyncClient for outbound calls (Gemini, Documate).

One pooled client per process; the app lifespan closes it on shutdown.
"""

from typing import Callable, Dict, Optional

import httpx

from ...config import get_gemini_timeout

CONNECT_TIMEOUT = 5.0
DOCUMATE_TIMEOUT = 60.0  # HTML -> PDF rendering is slow
DEFAULT_TIMEOUT = 30.0

_SERVICE_TIMEOUTS: Dict[str, Callable[[], float]] = {
    "gemini": get_gemini_timeout,
    "documate": lambda: DOCUMATE_TIMEOUT,
}

_client: Optional[httpx.AsyncClient] = None


def get_timeout(service: str) -> httpx.Timeout:
    """Read/write timeout for *service*, with a short connect timeout."""
    seconds_for = _SERVICE_TIMEOUTS.get(service.lower())
    seconds = seconds_for() if seconds_for is not None else DEFAULT_TIMEOUT
    return httpx.Timeout(seconds, connect=CONNECT_TIMEOUT)


async def get_client() -> httpx.AsyncClient:
    """Return the process-wide client, creating it on first use."""
    global _client
    if _client is None or _client.is_closed:
        _client = httpx.AsyncClient(
            timeout=get_timeout("gemini"),
            limits=httpx.Limits(max_keepalive_connections=5, max_connections=10),
        )
    return _client


async def close_client() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
