"""Report store: persist, list, fetch and delete saved validation reports.

Every query is scoped by ``owner_id``; one user can never see or delete
another user's rows. Errors from SQLAlchemy are not caught here; the
routes surface them verbatim.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence
from uuid import UUID

from sqlalchemy.orm import Session

from ..models.idea import BusinessIdea
from ..models.report import ValidationReport

IDEA_TITLE_MAX_LENGTH = 100


def idea_title(text: str, max_length: int = IDEA_TITLE_MAX_LENGTH) -> str:
    """Truncate idea text for listings, marking the cut with '...'."""
    text = text.strip()
    return text[:max_length] + "..." if len(text) > max_length else text


def create_idea(db: Session, owner_id: str, text: str, tools: Sequence[str]) -> BusinessIdea:
    """Stage the idea a report was generated from; the caller commits."""
    idea = BusinessIdea(
        user_id=owner_id,
        title=idea_title(text),
        description=text.strip(),
        selected_tools=json.dumps(list(tools)),
    )
    db.add(idea)
    db.flush()
    return idea


def create_report(
    db: Session,
    owner_id: str,
    idea_id: UUID,
    results: List[Dict[str, Any]],
    average_score: float,
) -> ValidationReport:
    report = ValidationReport(
        user_id=owner_id,
        business_idea_id=idea_id,
        report_data=json.dumps(results),
        average_score=average_score,
    )
    db.add(report)
    db.flush()
    return report


def save_report(
    db: Session,
    owner_id: str,
    text: str,
    tools: Sequence[str],
    results: List[Dict[str, Any]],
    average_score: float,
) -> ValidationReport:
    """Create the idea row and the report row that points at it, in one commit."""
    idea = create_idea(db, owner_id, text, tools)
    report = create_report(db, owner_id, idea.id, results, average_score)
    db.commit()
    db.refresh(report)
    return report


def list_reports(db: Session, owner_id: str) -> List[ValidationReport]:
    """All reports for *owner_id*, newest first."""
    return (
        db.query(ValidationReport)
        .filter(ValidationReport.user_id == owner_id)
        .order_by(ValidationReport.created_at.desc())
        .all()
    )


def get_report(db: Session, owner_id: str, report_id: UUID) -> Optional[ValidationReport]:
    return (
        db.query(ValidationReport)
        .filter(
            ValidationReport.id == str(report_id),
            ValidationReport.user_id == owner_id,
        )
        .first()
    )


def delete_report(db: Session, owner_id: str, report_id: UUID) -> bool:
    """Delete a report; its idea goes too once nothing else references it.

    Returns False when no such report belongs to *owner_id*.
    """
    report = get_report(db, owner_id, report_id)
    if report is None:
        return False

    idea_id = report.business_idea_id
    db.delete(report)
    db.flush()

    remaining = (
        db.query(ValidationReport)
        .filter(ValidationReport.business_idea_id == str(idea_id))
        .count()
    )
    if remaining == 0:
        idea = db.query(BusinessIdea).filter(BusinessIdea.id == str(idea_id)).first()
        if idea is not None:
            db.delete(idea)

    db.commit()
    return True


def decode_results(report: ValidationReport) -> List[Dict[str, Any]]:
    return json.loads(report.report_data or "[]")


def decode_tools(idea: Optional[BusinessIdea]) -> List[str]:
    if idea is None:
        return []
    return json.loads(idea.selected_tools or "[]")
