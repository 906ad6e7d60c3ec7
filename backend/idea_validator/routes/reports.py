"""Saved report routes — persist, list, fetch, delete and export reports.

Endpoints:
  POST   /reports                    — Save a validation run
  GET    /reports                    — List reports for current user
  GET    /reports/{report_id}        — Get a single report
  GET    /reports/{report_id}/export — Download a saved report as PDF/HTML
  DELETE /reports/{report_id}        — Delete a report
"""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..api_errors import ApiError
from ..database import get_db
from ..models.report import ValidationReport
from ..schemas.report_schema import ReportListResponse, ReportRecord, SaveReportRequest
from ..schemas.validation_schema import ErrorResponse
from ..services import report_service
from ..services.auth_dependency import CurrentUser, get_current_user
from ..services.export_service import ExportError, export_document

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/reports",
    tags=["Reports"],
)


# ── Helpers ──────────────────────────────────────────────────────────────

def _record_to_response(record: ValidationReport) -> ReportRecord:
    """Convert a ValidationReport ORM instance to a ReportRecord response."""
    idea = record.business_idea
    return ReportRecord(
        id=str(record.id),
        idea_id=str(record.business_idea_id),
        idea_title=idea.title if idea is not None else "",
        business_idea=idea.description if idea is not None else "",
        selected_tools=report_service.decode_tools(idea),
        results=report_service.decode_results(record),
        average_score=record.average_score,
        created_at=record.created_at,
    )


def _store_error(db: Session, action: str, exc: SQLAlchemyError) -> ApiError:
    db.rollback()
    logger.error("[REPORTS] %s failed: %s", action, exc)
    return ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, f"Failed to {action}", str(exc))


def _not_found(report_id: UUID) -> ApiError:
    return ApiError(status.HTTP_404_NOT_FOUND, "Report not found", f"Report {report_id} not found")


# ── Routes ───────────────────────────────────────────────────────────────

@router.post(
    "",
    response_model=ReportRecord,
    status_code=status.HTTP_201_CREATED,
    summary="Save a validation report",
    responses={status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse}},
)
def save_report(
    payload: SaveReportRequest,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> ReportRecord:
    """Persist the idea and its validation results for the current user."""
    try:
        report = report_service.save_report(
            db,
            current_user.id,
            payload.business_idea,
            payload.selected_tools,
            [result.model_dump() for result in payload.results],
            payload.average_score,
        )
    except SQLAlchemyError as exc:
        raise _store_error(db, "save report", exc) from exc

    logger.info("[REPORTS] Saved report %s for user %s", report.id, current_user.id)
    return _record_to_response(report)


@router.get(
    "",
    response_model=ReportListResponse,
    summary="List saved reports for current user",
)
def list_reports(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> ReportListResponse:
    """Return all reports for the logged-in user, sorted by created_at DESC."""
    try:
        records = report_service.list_reports(db, current_user.id)
    except SQLAlchemyError as exc:
        raise _store_error(db, "load reports", exc) from exc
    return ReportListResponse(reports=[_record_to_response(r) for r in records])


@router.get(
    "/{report_id}",
    response_model=ReportRecord,
    summary="Get a saved report",
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
)
def get_report(
    report_id: UUID,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> ReportRecord:
    try:
        record = report_service.get_report(db, current_user.id, report_id)
    except SQLAlchemyError as exc:
        raise _store_error(db, "load report", exc) from exc
    if record is None:
        raise _not_found(report_id)
    return _record_to_response(record)


@router.get(
    "/{report_id}/export",
    summary="Export a saved report",
    response_class=Response,
    responses={
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
        status.HTTP_502_BAD_GATEWAY: {"model": ErrorResponse},
    },
)
async def export_saved_report(
    report_id: UUID,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> Response:
    try:
        record = await run_in_threadpool(report_service.get_report, db, current_user.id, report_id)
    except SQLAlchemyError as exc:
        raise _store_error(db, "load report", exc) from exc
    if record is None:
        raise _not_found(report_id)

    idea_text = record.business_idea.description if record.business_idea is not None else ""
    try:
        document = await export_document(
            report_service.decode_results(record), record.average_score, idea_text
        )
    except ExportError as exc:
        raise ApiError(status.HTTP_502_BAD_GATEWAY, str(exc), "PDF service unavailable.") from exc

    return Response(
        content=document.content,
        media_type=document.media_type,
        headers={"Content-Disposition": f'attachment; filename="{document.filename}"'},
    )


@router.delete(
    "/{report_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a saved report",
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
)
def delete_report(
    report_id: UUID,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> Response:
    try:
        deleted = report_service.delete_report(db, current_user.id, report_id)
    except SQLAlchemyError as exc:
        raise _store_error(db, "delete report", exc) from exc
    if not deleted:
        raise _not_found(report_id)

    logger.info("[REPORTS] Deleted report %s for user %s", report_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
