"""Parse a model's raw text reply into a scored tool verdict.

Handles:
  - Markdown fences (```json ... ``` or bare ``` ... ```)
  - Leading/trailing whitespace and BOM
  - Missing or mistyped ``score`` / ``summary`` / ``details``

A model-supplied ``status`` is ignored; status is recomputed from the
clamped score.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

from ..agents.idea_validation.errors import (
    IncompleteResponseError,
    InvalidScoreError,
    MalformedResponseError,
)
from .score_normalizer import clamp_score, derive_status

_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)

REQUIRED_FIELDS = ("score", "summary", "details")


# ── Parse outcomes ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class ParsedReply:
    score: int
    status: str
    summary: str
    details: str


@dataclass(frozen=True)
class Malformed:
    reason: str


@dataclass(frozen=True)
class Incomplete:
    missing_fields: List[str] = field(default_factory=list)


ParseOutcome = Union[ParsedReply, Malformed, Incomplete]


# ── Steps ───────────────────────────────────────────────────────────────

def extract_json_text(text: str) -> str:
    """Return the fenced block's body if there is one, else the trimmed text."""
    cleaned = (text or "").strip().lstrip("\ufeff")
    match = _FENCE_RE.search(cleaned)
    if match:
        return match.group(1).strip()
    return cleaned


def extract_payload(text: str) -> Dict[str, Any]:
    """Decode the JSON object carried by *text*.

    Raises MalformedResponseError if the reply is empty, is not JSON, or
    is JSON but not an object.
    """
    candidate = extract_json_text(text)
    if not candidate:
        raise MalformedResponseError("Model reply is empty")
    try:
        payload = json.loads(candidate)
    except json.JSONDecodeError as exc:
        raise MalformedResponseError(f"Model reply is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise MalformedResponseError(
            f"Model reply is JSON {type(payload).__name__}, expected an object"
        )
    return payload


def validate_payload(payload: Dict[str, Any]) -> ParsedReply:
    """Check required fields, normalize the score and derive the status.

    Raises IncompleteResponseError naming every field that failed.
    """
    missing: List[str] = []

    raw_score = payload.get("score")
    score = None
    try:
        score = clamp_score(raw_score)
    except InvalidScoreError:
        missing.append("score")

    summary = payload.get("summary")
    if not isinstance(summary, str) or not summary.strip():
        missing.append("summary")

    details = payload.get("details")
    if not isinstance(details, str) or not details.strip():
        missing.append("details")

    if missing or score is None:
        raise IncompleteResponseError(missing)

    return ParsedReply(
        score=score,
        status=derive_status(score),
        summary=summary.strip(),
        details=details.strip(),
    )


def parse_tool_reply(text: str) -> ParseOutcome:
    """Run extraction and validation, folding failures into outcome values."""
    try:
        payload = extract_payload(text)
    except MalformedResponseError as exc:
        return Malformed(reason=str(exc))
    try:
        return validate_payload(payload)
    except IncompleteResponseError as exc:
        return Incomplete(missing_fields=exc.missing_fields)
