from typing import List

from pydantic import Field

from .validation_schema import CamelModel, ToolResult


class ExportRequest(CamelModel):
    """Missing idea text or results are rejected by the route with a 400."""

    validation_results: List[ToolResult] = Field(default_factory=list)
    average_score: float = Field(default=0.0, ge=0, le=10)
    business_idea: str = Field(default="", max_length=10000)
