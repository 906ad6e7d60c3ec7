"""Idea validation routes.

Endpoints:
  GET  /tools          — Validation tools this deployment offers
  POST /validate-idea  — Score an idea with the selected tools

The route is thin; sequencing, retries and fallbacks live in the
orchestrator.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from ..agents.idea_validation.errors import (
    AllToolsFailedError,
    EmptyInputError,
    ModelNotConfiguredError,
    UnknownToolError,
)
from ..agents.idea_validation.orchestrator import ValidationOrchestrator, ValidationRun
from ..agents.idea_validation.prompts import TOOL_CATALOG, enabled_tool_ids
from ..api_errors import ApiError
from ..config import is_gemini_available
from ..schemas.validation_schema import (
    ErrorResponse,
    FailedTool,
    ToolResult,
    ValidateIdeaRequest,
    ValidationResponse,
)
from ..services.auth_dependency import CurrentUser, get_optional_user
from ..services.gemini_client import GeminiClient
from ..services.session_state import SessionStore, get_session_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Validation"])

_CONFIG_HINT = "Please try again. If the problem persists, check your API configuration."


class ToolInfo(BaseModel):
    id: str
    icon: str
    title: str


# ── Dependencies ─────────────────────────────────────────────────────────

def get_model_client() -> GeminiClient:
    if not is_gemini_available():
        logger.error("[VALIDATE] GEMINI_API_KEY is not configured")
        raise ApiError(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "AI service is not configured",
            "Set GEMINI_API_KEY in the server environment.",
        )
    return GeminiClient()


def get_orchestrator(model_client: GeminiClient = Depends(get_model_client)) -> ValidationOrchestrator:
    return ValidationOrchestrator(model_client)


# ── Helpers ──────────────────────────────────────────────────────────────

def _run_to_response(run: ValidationRun) -> ValidationResponse:
    return ValidationResponse(
        results=[ToolResult(**result.to_dict()) for result in run.results],
        average_score=run.average_score,
        completed_tools=run.completed_tools,
        total_tools=run.total_tools,
        warning=run.warning,
        failed_tools=[FailedTool(**item) for item in run.failed_tools] or None,
    )


# ── Routes ───────────────────────────────────────────────────────────────

@router.get(
    "/tools",
    response_model=List[ToolInfo],
    summary="List validation tools",
)
def list_tools() -> List[ToolInfo]:
    """Return the enabled tools in display order."""
    return [
        ToolInfo(id=spec.id, icon=spec.icon, title=spec.title)
        for spec in (TOOL_CATALOG[tool_id] for tool_id in enabled_tool_ids())
    ]


@router.post(
    "/validate-idea",
    response_model=ValidationResponse,
    response_model_exclude_none=True,
    summary="Validate a business idea",
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse, "description": "Empty input or unknown tool"},
        status.HTTP_502_BAD_GATEWAY: {"model": ErrorResponse, "description": "Every tool failed upstream"},
        status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ErrorResponse, "description": "AI service not configured"},
    },
)
async def validate_idea(
    payload: ValidateIdeaRequest,
    orchestrator: ValidationOrchestrator = Depends(get_orchestrator),
    current_user: Optional[CurrentUser] = Depends(get_optional_user),
    session_store: SessionStore = Depends(get_session_store),
) -> ValidationResponse:
    """Run the selected tools over the idea, one after another."""
    logger.info(
        "[VALIDATE] Request: tools=%s, idea='%s...'",
        payload.selected_tools, payload.business_idea[:70],
    )
    try:
        run = await orchestrator.run(payload.business_idea, payload.selected_tools)
    except EmptyInputError as exc:
        raise ApiError(
            status.HTTP_400_BAD_REQUEST,
            str(exc),
            "Provide a business idea and select at least one validation tool.",
        ) from exc
    except UnknownToolError as exc:
        raise ApiError(
            status.HTTP_400_BAD_REQUEST,
            str(exc),
            f"Available tools: {', '.join(enabled_tool_ids())}.",
        ) from exc
    except ModelNotConfiguredError as exc:
        raise ApiError(status.HTTP_503_SERVICE_UNAVAILABLE, str(exc), _CONFIG_HINT) from exc
    except AllToolsFailedError as exc:
        reasons = "; ".join(f"{item['tool']}: {item['error']}" for item in exc.failed_tools)
        raise ApiError(
            status.HTTP_502_BAD_GATEWAY,
            "All validation tools failed",
            f"{reasons}. {_CONFIG_HINT}",
        ) from exc

    response = _run_to_response(run)

    if current_user is not None:
        state = session_store.get(current_user.id).with_run(
            run.idea_text,
            run.requested_tools,
            response.model_dump(by_alias=True, exclude_none=True),
        )
        session_store.put(current_user.id, state)

    return response
