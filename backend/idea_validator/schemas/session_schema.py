from typing import List, Optional

from pydantic import Field

from .validation_schema import CamelModel, ValidationResponse


class SessionDraft(CamelModel):
    """Idea text and tool choice carried from the input screen to processing."""

    business_idea: str = Field(default="", max_length=10000)
    selected_tools: List[str] = Field(default_factory=list)


class SessionStateResponse(SessionDraft):
    last_run: Optional[ValidationResponse] = None
