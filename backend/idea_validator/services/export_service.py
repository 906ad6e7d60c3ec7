"""Report exporter: fixed HTML template, optionally rendered to PDF remotely.

Reads configuration from environment variables:
  DOCUMATE_API_KEY  — when set, exports are PDFs rendered by Documate
  DOCUMATE_API_URL  — https://api.documate.org/v1/generate

Without a key the HTML itself is returned, so exports keep working in
development. Remote failures raise ExportError; nothing here retries.
"""

from __future__ import annotations

import html
import logging
import time
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional, Sequence

import httpx

from ..agents.idea_validation.http_client import get_timeout
from ..config import get_documate_key, get_documate_url
from .score_normalizer import MODERATE_THRESHOLD, STRONG_THRESHOLD

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"
HTML_MEDIA_TYPE = "text/html"

_COLOR_STRONG = "#10b981"
_COLOR_MODERATE = "#f59e0b"
_COLOR_NEEDS_WORK = "#ef4444"
_COLOR_UNKNOWN = "#6b7280"

_STATUS_COLORS = {
    "strong": _COLOR_STRONG,
    "moderate": _COLOR_MODERATE,
    "needs-work": _COLOR_NEEDS_WORK,
}


class ExportError(Exception):
    """Raised when the document service returns an error or is unavailable."""


@dataclass(frozen=True)
class ExportedDocument:
    content: bytes
    media_type: str
    filename: str


def is_pdf_export_available() -> bool:
    """Return True if the Documate API key is configured."""
    return bool(get_documate_key())


# ── HTML rendering ──────────────────────────────────────────────────────

def score_color(score: float) -> str:
    if score >= STRONG_THRESHOLD:
        return _COLOR_STRONG
    if score >= MODERATE_THRESHOLD:
        return _COLOR_MODERATE
    return _COLOR_NEEDS_WORK


def status_badge(status: str) -> str:
    color = _STATUS_COLORS.get(status, _COLOR_UNKNOWN)
    return (
        f'<span style="background-color: {color}; color: white; padding: 4px 8px; '
        f'border-radius: 4px; font-size: 12px; font-weight: 500;">'
        f"{html.escape(status.upper())}</span>"
    )


_REPORT_CSS = """
    body { font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif; line-height: 1.6;
           color: #333; max-width: 800px; margin: 0 auto; padding: 20px; }
    .header { text-align: center; margin-bottom: 40px; border-bottom: 3px solid #3b82f6; padding-bottom: 20px; }
    .title { font-size: 28px; font-weight: bold; color: #1e40af; margin-bottom: 10px; }
    .subtitle { font-size: 16px; color: #6b7280; }
    .business-idea { background-color: #f8fafc; border-left: 4px solid #3b82f6; padding: 20px;
                     margin: 30px 0; border-radius: 0 8px 8px 0; }
    .business-idea h3 { color: #1e40af; margin-top: 0; }
    .overall-score { text-align: center; background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
                     color: white; padding: 30px; border-radius: 12px; margin: 30px 0; }
    .score-circle { display: inline-block; width: 80px; height: 80px; border-radius: 50%;
                    background-color: rgba(255, 255, 255, 0.2); line-height: 80px; font-size: 32px;
                    font-weight: bold; margin: 10px 0; }
    .validation-result { border: 1px solid #e5e7eb; border-radius: 8px; margin: 20px 0; overflow: hidden; }
    .result-header { background-color: #f9fafb; padding: 20px; border-bottom: 1px solid #e5e7eb; }
    .result-title { font-size: 18px; font-weight: 600; color: #1f2937; margin-bottom: 5px; }
    .result-meta { display: flex; align-items: center; gap: 15px; font-size: 14px; }
    .score-badge { font-weight: bold; font-size: 16px; }
    .result-content { padding: 20px; }
    .summary { font-style: italic; color: #6b7280; margin-bottom: 15px; }
    .details { color: #374151; white-space: pre-wrap; }
    .footer { text-align: center; margin-top: 40px; padding-top: 20px; border-top: 1px solid #e5e7eb;
              color: #6b7280; font-size: 14px; }
    .page-break { page-break-before: always; }
"""


def _render_result(result: Dict[str, Any], index: int) -> str:
    score = result.get("score", 0)
    page_break = '<div class="page-break"></div>' if index > 0 else ""
    return f"""
      {page_break}
      <div class="validation-result">
        <div class="result-header">
          <div class="result-title">{html.escape(str(result.get("icon", "")))} {html.escape(str(result.get("title", "")))}</div>
          <div class="result-meta">
            <span class="score-badge" style="color: {score_color(score)};">Score: {score}/10</span>
            {status_badge(str(result.get("status", "")))}
          </div>
        </div>
        <div class="result-content">
          <div class="summary">{html.escape(str(result.get("summary", "")))}</div>
          <div class="details">{html.escape(str(result.get("details", "")))}</div>
        </div>
      </div>"""


def render_report_html(
    results: Sequence[Dict[str, Any]],
    average_score: float,
    idea_text: str,
    generated_on: Optional[date] = None,
) -> str:
    """Render the fixed report template. All user and model text is escaped."""
    generated_on = generated_on or date.today()
    count = len(results)
    plural = "s" if count != 1 else ""
    sections = "".join(_render_result(result, i) for i, result in enumerate(results))

    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="UTF-8">
  <title>Business Idea Validation Report</title>
  <style>{_REPORT_CSS}</style>
</head>
<body>
  <div class="header">
    <div class="title">Business Idea Validation Report</div>
    <div class="subtitle">Generated on {generated_on.strftime("%B")} {generated_on.day}, {generated_on.year}</div>
  </div>

  <div class="business-idea">
    <h3>💡 Business Idea</h3>
    <p>{html.escape(idea_text)}</p>
  </div>

  <div class="overall-score">
    <h2 style="margin-top: 0;">Overall Validation Score</h2>
    <div class="score-circle">{average_score:g}/10</div>
    <p style="margin-bottom: 0;">Based on {count} validation tool{plural}</p>
  </div>
{sections}

  <div class="footer">
    <p>This report was generated using AI-powered validation tools.<br>
    Results should be used as guidance and supplemented with additional market research.</p>
  </div>
</body>
</html>
"""


# ── Document generation ─────────────────────────────────────────────────

async def render_pdf_via_documate(
    html_content: str,
    *,
    client: Optional[httpx.AsyncClient] = None,
) -> bytes:
    """POST the HTML to Documate and return the PDF bytes.

    Raises ExportError if the key is missing, the request fails, or the
    service answers with a non-2xx status.
    """
    api_key = get_documate_key()
    if not api_key:
        raise ExportError("Documate API key missing; PDF export unavailable")

    payload = {
        "html": html_content,
        "options": {
            "format": "A4",
            "printBackground": True,
            "margin": {"top": "1in", "right": "1in", "bottom": "1in", "left": "1in"},
        },
    }
    headers = {"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"}

    t0 = time.perf_counter()
    try:
        if client is not None:
            response = await client.post(get_documate_url(), headers=headers, json=payload)
        else:
            async with httpx.AsyncClient(timeout=get_timeout("documate")) as owned:
                response = await owned.post(get_documate_url(), headers=headers, json=payload)
    except httpx.TimeoutException as exc:
        logger.error("[EXPORT] Documate request timed out")
        raise ExportError("PDF generation request timed out") from exc
    except httpx.HTTPError as exc:
        logger.error("[EXPORT] Documate request failed: %s", exc)
        raise ExportError(f"PDF generation request failed: {exc}") from exc

    logger.info("[EXPORT] Documate HTTP %d (%.1fs)", response.status_code, time.perf_counter() - t0)
    if response.status_code >= 400:
        logger.error("[EXPORT] Documate error response: %s", response.text[:400])
        raise ExportError(f"Failed to generate PDF: HTTP {response.status_code}")

    return response.content


async def export_document(
    results: Sequence[Dict[str, Any]],
    average_score: float,
    idea_text: str,
    *,
    client: Optional[httpx.AsyncClient] = None,
) -> ExportedDocument:
    """Produce the report as a PDF when Documate is configured, else as HTML."""
    html_content = render_report_html(results, average_score, idea_text)
    stamp = int(time.time() * 1000)

    if is_pdf_export_available():
        pdf = await render_pdf_via_documate(html_content, client=client)
        logger.info("[EXPORT] PDF generated (%d bytes)", len(pdf))
        return ExportedDocument(pdf, PDF_MEDIA_TYPE, f"validation-report-{stamp}.pdf")

    logger.info("[EXPORT] PDF export not configured, returning HTML")
    return ExportedDocument(html_content.encode("utf-8"), HTML_MEDIA_TYPE, f"validation-report-{stamp}.html")
