"""Report export route.

Endpoints:
  POST /generate-pdf-report — Render the current results as a downloadable document
"""

import logging

from fastapi import APIRouter, Response, status

from ..api_errors import ApiError
from ..schemas.export_schema import ExportRequest
from ..schemas.validation_schema import ErrorResponse
from ..services.export_service import ExportError, export_document

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Export"])


@router.post(
    "/generate-pdf-report",
    summary="Generate a report document",
    response_class=Response,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_502_BAD_GATEWAY: {"model": ErrorResponse},
    },
)
async def generate_pdf_report(payload: ExportRequest) -> Response:
    """Return a PDF when Documate is configured, otherwise the report HTML."""
    if not payload.validation_results or not payload.business_idea.strip():
        raise ApiError(
            status.HTTP_400_BAD_REQUEST,
            "Validation results and business idea are required",
            "Run a validation before exporting the report.",
        )

    try:
        document = await export_document(
            [result.model_dump() for result in payload.validation_results],
            payload.average_score,
            payload.business_idea.strip(),
        )
    except ExportError as exc:
        raise ApiError(
            status.HTTP_502_BAD_GATEWAY,
            str(exc),
            "Please try again. If the problem persists, check your Documate API key.",
        ) from exc

    logger.info("[EXPORT] Sending %s (%d bytes)", document.filename, len(document.content))
    return Response(
        content=document.content,
        media_type=document.media_type,
        headers={"Content-Disposition": f'attachment; filename="{document.filename}"'},
    )
