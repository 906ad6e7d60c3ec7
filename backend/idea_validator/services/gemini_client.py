"""Google Gemini ``generateContent`` client over httpx.

One ``generate()`` call is one HTTP request; retries belong to the caller
(see ``services.retry``). HTTP failures are mapped onto the pipeline's
error taxonomy:

  429                 -> UpstreamRateLimitedError   (retryable)
  503 / timeout       -> UpstreamUnavailableError   (retryable)
  other non-2xx       -> UpstreamRequestError       (terminal)
  transport failure   -> UpstreamRequestError       (terminal)
  200 but not JSON    -> MalformedResponseError
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

import httpx

from ..agents.idea_validation import http_client
from ..agents.idea_validation.errors import (
    MalformedResponseError,
    ModelNotConfiguredError,
    UpstreamRateLimitedError,
    UpstreamRequestError,
    UpstreamUnavailableError,
)
from ..config import (
    get_gemini_base_url,
    get_gemini_key,
    get_gemini_max_output_tokens,
    get_gemini_model,
    get_gemini_temperature,
)

logger = logging.getLogger(__name__)

_SAFETY_CATEGORIES = (
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
)


def build_payload(prompt: str, *, temperature: float, max_output_tokens: int) -> Dict[str, Any]:
    """Build a generateContent request body."""
    return {
        "contents": [{"parts": [{"text": prompt}]}],
        "generationConfig": {
            "temperature": temperature,
            "maxOutputTokens": max_output_tokens,
            "candidateCount": 1,
        },
        "safetySettings": [
            {"category": category, "threshold": "BLOCK_MEDIUM_AND_ABOVE"}
            for category in _SAFETY_CATEGORIES
        ],
    }


def extract_text(data: Dict[str, Any]) -> str:
    """Pull the first candidate's text; empty string when the reply was blocked."""
    candidates = data.get("candidates") or []
    if not candidates:
        block_reason = (data.get("promptFeedback") or {}).get("blockReason")
        if block_reason:
            logger.warning("[GEMINI] No candidates returned, prompt blocked: %s", block_reason)
        else:
            logger.warning("[GEMINI] No candidates returned")
        return ""
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(part.get("text", "") for part in parts if isinstance(part, dict))


class GeminiClient:
    """Thin async wrapper around the Gemini REST API."""

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key if api_key is not None else get_gemini_key()
        self.model = model or get_gemini_model()
        self.base_url = (base_url or get_gemini_base_url()).rstrip("/")
        self._client = client

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    async def _http(self) -> httpx.AsyncClient:
        if self._client is not None:
            return self._client
        return await http_client.get_client()

    async def generate(self, prompt: str) -> str:
        """Send one prompt and return the raw reply text."""
        if not self.api_key:
            raise ModelNotConfiguredError("GEMINI_API_KEY is not configured")

        payload = build_payload(
            prompt,
            temperature=get_gemini_temperature(),
            max_output_tokens=get_gemini_max_output_tokens(),
        )
        client = await self._http()

        t0 = time.perf_counter()
        try:
            response = await client.post(
                self.endpoint,
                headers={"x-goog-api-key": self.api_key, "Content-Type": "application/json"},
                json=payload,
                timeout=http_client.get_timeout("gemini"),
            )
        except httpx.TimeoutException as exc:
            logger.warning("[GEMINI] Request timed out after %.1fs", time.perf_counter() - t0)
            raise UpstreamUnavailableError(f"Gemini request timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            logger.error("[GEMINI] Transport error: %s", exc)
            raise UpstreamRequestError(f"Gemini request failed: {exc}") from exc

        duration = time.perf_counter() - t0
        logger.info("[GEMINI] HTTP %d from %s (%.1fs)", response.status_code, self.model, duration)

        if response.status_code == 429:
            raise UpstreamRateLimitedError("Gemini API rate limited (HTTP 429)", status_code=429)
        if response.status_code == 503:
            raise UpstreamUnavailableError("Gemini API unavailable (HTTP 503)", status_code=503)
        if response.status_code >= 400:
            body = response.text[:400]
            logger.error("[GEMINI] Error response: %s", body)
            raise UpstreamRequestError(
                f"Gemini API error: HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise MalformedResponseError("Gemini response body is not valid JSON") from exc
        if not isinstance(data, dict):
            raise MalformedResponseError("Gemini response body is not a JSON object")

        text = extract_text(data)
        logger.debug("[GEMINI] Raw output length: %d chars", len(text))
        return text
