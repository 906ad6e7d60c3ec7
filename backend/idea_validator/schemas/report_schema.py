"""Pydantic schemas for saved validation reports.

ReportRecord is the DB-backed response returned by all report endpoints.
"""

from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import Field

from .validation_schema import CamelModel, ToolResult


class SaveReportRequest(CamelModel):
    business_idea: str = Field(..., min_length=1, max_length=10000)
    selected_tools: List[str] = Field(..., min_length=1)
    results: List[ToolResult] = Field(..., min_length=1)
    average_score: float = Field(..., ge=0, le=10)


class ReportRecord(CamelModel):
    """Single saved report, returned by all report endpoints."""

    id: str = Field(..., description="Report UUID")
    idea_id: str = Field(..., description="Linked business idea UUID")
    idea_title: str = Field(..., description="Idea text truncated for listings")
    business_idea: str = Field(..., description="Full idea text")
    selected_tools: List[str] = Field(default_factory=list)
    results: List[ToolResult] = Field(default_factory=list)
    average_score: float
    created_at: datetime


class ReportListResponse(CamelModel):
    reports: List[ReportRecord] = Field(
        default_factory=list, description="Reports sorted by created_at DESC"
    )
