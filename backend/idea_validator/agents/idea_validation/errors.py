"""Error taxonomy for the idea validation pipeline.

Per-tool errors (malformed or incomplete replies, exhausted retries) are
absorbed by the orchestrator into fallback results. Input errors and
``AllToolsFailedError`` reach the route layer, which maps them to HTTP.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence


class IdeaValidationError(Exception):
    """Base class for all validation pipeline errors."""


class EmptyInputError(IdeaValidationError):
    """Idea text or tool selection is empty."""


class UnknownToolError(IdeaValidationError):
    def __init__(self, tool_id: str):
        self.tool_id = tool_id
        super().__init__(f"Unknown validation tool: {tool_id!r}")


class InvalidScoreError(IdeaValidationError):
    """Raw score is not a finite number in a usable range."""


class MalformedResponseError(IdeaValidationError):
    """Model reply could not be decoded as a JSON object."""


class IncompleteResponseError(IdeaValidationError):
    def __init__(self, missing_fields: Sequence[str]):
        self.missing_fields = list(missing_fields)
        super().__init__(f"Model reply missing or invalid fields: {', '.join(self.missing_fields)}")


# ── Upstream (model API) ────────────────────────────────────────────────

class UpstreamError(IdeaValidationError):
    """The model API call failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class RetryableUpstreamError(UpstreamError):
    """Transient failure; the retry controller backs off and tries again."""


class UpstreamRateLimitedError(RetryableUpstreamError):
    """HTTP 429."""


class UpstreamUnavailableError(RetryableUpstreamError):
    """HTTP 503 or a transport timeout."""


class UpstreamRequestError(UpstreamError):
    """Terminal failure: any other non-2xx status or transport error."""


class ModelNotConfiguredError(IdeaValidationError):
    """No model API key is configured."""


class AllToolsFailedError(IdeaValidationError):
    def __init__(self, failed_tools: List[Dict[str, str]]):
        self.failed_tools = failed_tools
        names = ", ".join(item["tool"] for item in failed_tools) or "none"
        super().__init__(f"All validation tools failed ({names})")
