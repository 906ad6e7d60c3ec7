"""Pydantic schemas for the validation API.

The wire format is camelCase (``businessIdea``, ``averageScore``) to match
the browser client; Python code uses snake_case names throughout.
"""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from ..services.score_normalizer import derive_status


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ToolResult(CamelModel):
    """One tool's verdict. ``status`` must agree with ``score``."""

    id: str = Field(..., min_length=1)
    icon: str
    title: str
    score: int = Field(..., ge=1, le=10)
    status: Literal["strong", "moderate", "needs-work"]
    summary: str = Field(..., min_length=1)
    details: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def status_matches_score(self) -> "ToolResult":
        expected = derive_status(self.score)
        if self.status != expected:
            raise ValueError(
                f"status '{self.status}' does not match score {self.score} (expected '{expected}')"
            )
        return self


class ValidateIdeaRequest(CamelModel):
    """Emptiness is checked by the orchestrator, which answers 400 rather than 422."""

    business_idea: str = Field(default="", max_length=10000)
    selected_tools: List[str] = Field(default_factory=list)


class FailedTool(BaseModel):
    tool: str
    error: str


class ValidationResponse(CamelModel):
    results: List[ToolResult]
    average_score: float = Field(..., ge=0, le=10)
    completed_tools: int
    total_tools: int
    warning: Optional[str] = None
    failed_tools: Optional[List[FailedTool]] = None


class ErrorResponse(BaseModel):
    """Body for every handled API error."""

    error: str
    details: str
