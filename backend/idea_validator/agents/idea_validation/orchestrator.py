"""Validation orchestrator: one idea, several tools, strictly in sequence.

Per tool:
  1. Build the prompt from the catalog
  2. Call the model through the retry controller
  3. Parse and normalize the reply
  4. Pause before the next tool to stay under upstream rate limits

A single tool's failure never aborts the run. Unparseable replies and
exhausted retries yield a fallback result; terminal upstream errors leave
the tool out of ``results`` and list it in ``failed_tools``. Only a run
with no results at all raises AllToolsFailedError.
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Dict, List, Optional, Protocol, Sequence, Tuple

from ...config import (
    get_max_attempts,
    get_retry_base_delay,
    get_retry_max_jitter,
    get_tool_call_delay,
)
from ...services.response_parser import Incomplete, Malformed, ParsedReply, parse_tool_reply
from ...services.retry import call_with_retry
from ...services.score_normalizer import average_score, derive_status
from .errors import (
    AllToolsFailedError,
    EmptyInputError,
    MalformedResponseError,
    RetryableUpstreamError,
    UpstreamError,
)
from .prompts import ToolSpec, build_prompt, lookup
from .timing import RunTimer

logger = logging.getLogger(__name__)

FALLBACK_SCORE = 6
FALLBACK_SUMMARY = "Analysis completed with partial results due to response format issues."
FALLBACK_DETAILS = (
    "The AI analysis could not be fully completed for this dimension. "
    "The core evaluation suggests moderate potential with areas for improvement. "
    "Consider refining your business model and conducting additional market research, "
    "then run the validation again."
)


class ModelClient(Protocol):
    async def generate(self, prompt: str) -> str: ...


class RunState(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    PARTIALLY_COMPLETED = "partially_completed"
    FAILED = "failed"


@dataclass(frozen=True)
class ToolResult:
    id: str
    icon: str
    title: str
    score: int
    status: str
    summary: str
    details: str

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "icon": self.icon,
            "title": self.title,
            "score": self.score,
            "status": self.status,
            "summary": self.summary,
            "details": self.details,
        }


@dataclass
class ValidationRun:
    idea_text: str
    requested_tools: List[str]
    results: List[ToolResult] = field(default_factory=list)
    average_score: float = 0.0
    state: RunState = RunState.PENDING
    failed_tools: List[Dict[str, str]] = field(default_factory=list)
    fallback_tools: List[str] = field(default_factory=list)
    tool_durations_ms: Dict[str, float] = field(default_factory=dict)
    duration_ms: float = 0.0

    @property
    def completed_tools(self) -> int:
        return len(self.results)

    @property
    def total_tools(self) -> int:
        return len(self.requested_tools)

    @property
    def warning(self) -> Optional[str]:
        notes = []
        if self.failed_tools:
            names = ", ".join(item["tool"] for item in self.failed_tools)
            notes.append(
                f"{len(self.failed_tools)} of {self.total_tools} tools failed and were skipped: {names}."
            )
        if self.fallback_tools:
            notes.append(f"Fallback results were used for: {', '.join(self.fallback_tools)}.")
        return " ".join(notes) or None


def fallback_result(spec: ToolSpec) -> ToolResult:
    """Deterministic stand-in when a tool's reply cannot be used."""
    return ToolResult(
        id=spec.id,
        icon=spec.icon,
        title=spec.title,
        score=FALLBACK_SCORE,
        status=derive_status(FALLBACK_SCORE),
        summary=FALLBACK_SUMMARY,
        details=FALLBACK_DETAILS,
    )


def _dedupe(tool_ids: Sequence[str]) -> List[str]:
    seen = set()
    ordered = []
    for tool_id in tool_ids:
        if tool_id not in seen:
            seen.add(tool_id)
            ordered.append(tool_id)
    return ordered


class ValidationOrchestrator:
    """Runs one validation at a time; create a run per request."""

    def __init__(
        self,
        model_client: ModelClient,
        *,
        max_attempts: Optional[int] = None,
        base_delay: Optional[float] = None,
        max_jitter: Optional[float] = None,
        inter_call_delay: Optional[float] = None,
        enabled_tools: Optional[Sequence[str]] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        rand: Callable[[], float] = random.random,
    ):
        self.model_client = model_client
        self.max_attempts = max_attempts if max_attempts is not None else get_max_attempts()
        self.base_delay = base_delay if base_delay is not None else get_retry_base_delay()
        self.max_jitter = max_jitter if max_jitter is not None else get_retry_max_jitter()
        self.inter_call_delay = (
            inter_call_delay if inter_call_delay is not None else get_tool_call_delay()
        )
        self.enabled_tools = enabled_tools
        self._sleep = sleep
        self._rand = rand
        self.state = RunState.PENDING
        self.tool_index: Optional[int] = None

    async def _evaluate(self, spec: ToolSpec, idea_text: str) -> Tuple[ToolResult, bool]:
        """Score one tool; the flag is True when the fallback was substituted.

        Raises UpstreamError only for terminal failures.
        """
        prompt = build_prompt(spec.id, idea_text, self.enabled_tools)

        try:
            reply = await call_with_retry(
                lambda: self.model_client.generate(prompt),
                self.max_attempts,
                self.base_delay,
                max_jitter=self.max_jitter,
                sleep=self._sleep,
                rand=self._rand,
                label=spec.id,
            )
        except RetryableUpstreamError as exc:
            logger.warning("[VALIDATE] %s: retries exhausted (%s), using fallback", spec.id, exc)
            return fallback_result(spec), True
        except MalformedResponseError as exc:
            logger.warning("[VALIDATE] %s: unreadable response (%s), using fallback", spec.id, exc)
            return fallback_result(spec), True

        outcome = parse_tool_reply(reply)
        if isinstance(outcome, ParsedReply):
            return ToolResult(
                id=spec.id,
                icon=spec.icon,
                title=spec.title,
                score=outcome.score,
                status=outcome.status,
                summary=outcome.summary,
                details=outcome.details,
            ), False
        if isinstance(outcome, Malformed):
            logger.warning("[VALIDATE] %s: malformed reply (%s), using fallback", spec.id, outcome.reason)
        elif isinstance(outcome, Incomplete):
            logger.warning(
                "[VALIDATE] %s: incomplete reply, bad fields=%s, using fallback",
                spec.id, outcome.missing_fields,
            )
        else:
            raise TypeError(f"Unhandled parse outcome: {outcome!r}")
        logger.debug("[VALIDATE] %s raw reply: %s", spec.id, reply[:500])
        return fallback_result(spec), True

    async def run(self, idea_text: str, tool_ids: Sequence[str]) -> ValidationRun:
        """Validate *idea_text* with each tool in *tool_ids*, in order."""
        text = (idea_text or "").strip()
        if not text or not tool_ids:
            raise EmptyInputError("Business idea and selected tools are required")

        ordered = _dedupe(tool_ids)
        # Resolve every id up front so a typo costs no API calls
        specs = [lookup(tool_id, self.enabled_tools) for tool_id in ordered]

        run = ValidationRun(idea_text=text, requested_tools=ordered)
        self.state = run.state = RunState.RUNNING
        timer = RunTimer("validate")
        logger.info("[VALIDATE] Starting run with tools: %s", ordered)

        for index, spec in enumerate(specs):
            self.tool_index = index
            async with timer.tool(spec.id):
                try:
                    result, used_fallback = await self._evaluate(spec, text)
                except UpstreamError as exc:
                    logger.error("[VALIDATE] %s failed: %s", spec.id, exc)
                    run.failed_tools.append({"tool": spec.id, "error": str(exc)})
                    result, used_fallback = None, False

            if result is not None:
                if used_fallback:
                    run.fallback_tools.append(spec.id)
                run.results.append(result)
                logger.info("[VALIDATE] Completed %s with score %d", spec.id, result.score)

            if index < len(specs) - 1 and self.inter_call_delay > 0:
                await self._sleep(self.inter_call_delay)

        run.duration_ms = timer.finish()
        run.tool_durations_ms = dict(timer.tool_ms)
        run.average_score = average_score(r.score for r in run.results)

        if not run.results:
            self.state = run.state = RunState.FAILED
            raise AllToolsFailedError(run.failed_tools)

        if len(run.results) == len(ordered):
            run.state = RunState.COMPLETED
        else:
            run.state = RunState.PARTIALLY_COMPLETED
        self.state = run.state

        logger.info(
            "[VALIDATE] Run %s: %d/%d tools, average score %.1f",
            run.state.value, run.completed_tools, run.total_tools, run.average_score,
        )
        return run
