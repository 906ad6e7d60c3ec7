"""Prompt catalog for the validation tools.

Each tool is one evaluation dimension with its own prompt, icon and title.
The catalog is data; which tools a deployment exposes is configuration
(``ENABLED_TOOLS``), so adding or retiring a tool never touches the
orchestrator.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from ...config import get_enabled_tools
from .errors import UnknownToolError


@dataclass(frozen=True)
class ToolSpec:
    id: str
    icon: str
    title: str
    prompt: str


# ── Tool prompts ────────────────────────────────────────────────────────

_BUSINESS_IDEA_PROMPT = """\
Analyze this business idea for overall viability and potential. Focus on:
- Innovation and uniqueness
- Scalability potential
- Value proposition clarity
- Market timing
- Implementation feasibility

Provide a comprehensive analysis with specific recommendations and actionable insights. Be detailed and thorough in your response."""

_PROBLEM_SOLUTION_PROMPT = """\
Evaluate the problem-solution fit for this business idea. Analyze:
- Problem identification and validation
- Solution relevance and effectiveness
- User experience considerations
- Pain point severity
- Solution-market alignment

Provide detailed analysis with specific examples and actionable recommendations."""

_TARGET_AUDIENCE_PROMPT = """\
Analyze the target audience for this business idea. Examine:
- Market size and demographics
- User personas and psychographics
- Market segmentation opportunities
- Accessibility and reach
- Customer journey mapping

Provide comprehensive analysis with detailed insights and specific recommendations."""

_COMPETITOR_ANALYSIS_PROMPT = """\
Assess the competitive landscape for this business idea. Examine:
- Direct and indirect competitors
- Existing substitutes and workarounds
- Differentiation and defensibility
- Barriers to entry
- Gaps competitors leave open

Provide detailed competitive analysis with concrete positioning recommendations."""

_GO_TO_MARKET_PROMPT = """\
Assess the go-to-market strategy potential for this business idea. Review:
- Distribution channel opportunities
- Pricing strategy considerations
- Marketing approach effectiveness
- Sales process optimization
- Customer acquisition and retention

Provide detailed tactical recommendations and comprehensive strategy analysis."""


TOOL_CATALOG: Dict[str, ToolSpec] = {
    spec.id: spec
    for spec in (
        ToolSpec("business-idea", "💡", "Business Idea Validator", _BUSINESS_IDEA_PROMPT),
        ToolSpec("problem-solution", "❓", "Problem-Solution Fit", _PROBLEM_SOLUTION_PROMPT),
        ToolSpec("target-audience", "👥", "Target Audience Analysis", _TARGET_AUDIENCE_PROMPT),
        ToolSpec("competitor-analysis", "🔍", "Competitor Analysis", _COMPETITOR_ANALYSIS_PROMPT),
        ToolSpec("go-to-market", "🚀", "Go-to-Market Strategy", _GO_TO_MARKET_PROMPT),
    )
}


_REPLY_CONTRACT = """\
IMPORTANT: You must respond with a valid JSON object in this exact format (no markdown, no code blocks):
{
  "score": [number between 1-10],
  "status": "[strong/moderate/needs-work based on score: 8+ = strong, 6-7.9 = moderate, <6 = needs-work]",
  "summary": "[brief one-sentence summary of the analysis]",
  "details": "[detailed analysis as a single string with comprehensive insights, recommendations, and specific examples. Use line breaks (\\n) for formatting if needed]"
}

Make sure the response is valid JSON only, with no additional text or formatting."""


# ── Public API ──────────────────────────────────────────────────────────

def enabled_tool_ids(enabled: Optional[Sequence[str]] = None) -> List[str]:
    """Catalog ids available for validation, in catalog order.

    ``enabled`` overrides the ``ENABLED_TOOLS`` setting; ids it names that
    the catalog does not know are ignored.
    """
    selected = enabled if enabled is not None else get_enabled_tools()
    if selected is None:
        return list(TOOL_CATALOG)
    wanted = set(selected)
    return [tool_id for tool_id in TOOL_CATALOG if tool_id in wanted]


def lookup(tool_id: str, enabled: Optional[Sequence[str]] = None) -> ToolSpec:
    """Return the catalog entry for *tool_id*.

    Raises UnknownToolError if the id is not in the catalog or is disabled.
    """
    if tool_id not in enabled_tool_ids(enabled):
        raise UnknownToolError(tool_id)
    return TOOL_CATALOG[tool_id]


def build_prompt(tool_id: str, idea_text: str, enabled: Optional[Sequence[str]] = None) -> str:
    """Render the full model prompt for one tool."""
    spec = lookup(tool_id, enabled)
    return f'Business Idea: "{idea_text}"\n\n{spec.prompt}\n\n{_REPLY_CONTRACT}'
