"""Per-tool latency tracking for a validation run."""

import logging
import time
from contextlib import asynccontextmanager
from typing import Dict

logger = logging.getLogger(__name__)


def _elapsed_ms(since: float) -> float:
    return round((time.perf_counter() - since) * 1000, 1)


class RunTimer:
    """Records how long each tool took, and the run overall, in milliseconds.

    Usage:
        timer = RunTimer("validate")
        async with timer.tool("business-idea"):
            await evaluate()
        total_ms = timer.finish()
    """

    def __init__(self, label: str):
        self.label = label
        self.tool_ms: Dict[str, float] = {}
        self._started = time.perf_counter()

    @asynccontextmanager
    async def tool(self, tool_id: str):
        started = time.perf_counter()
        try:
            yield
        finally:
            self.tool_ms[tool_id] = _elapsed_ms(started)
            logger.info("[TIMING] %s/%s: %.0fms", self.label, tool_id, self.tool_ms[tool_id])

    def finish(self) -> float:
        total_ms = _elapsed_ms(self._started)
        slowest = max(self.tool_ms, key=self.tool_ms.get, default="-")
        logger.info(
            "[TIMING] %s: %d tool(s) in %.0fms, slowest=%s",
            self.label, len(self.tool_ms), total_ms, slowest,
        )
        return total_ms
