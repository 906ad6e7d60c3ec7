# Schemas package
from .validation_schema import (
    ErrorResponse,
    FailedTool,
    ToolResult,
    ValidateIdeaRequest,
    ValidationResponse,
)
from .report_schema import ReportListResponse, ReportRecord, SaveReportRequest
from .export_schema import ExportRequest
from .session_schema import SessionDraft, SessionStateResponse

__all__ = [
    "ErrorResponse",
    "FailedTool",
    "ToolResult",
    "ValidateIdeaRequest",
    "ValidationResponse",
    "ReportListResponse",
    "ReportRecord",
    "SaveReportRequest",
    "ExportRequest",
    "SessionDraft",
    "SessionStateResponse",
]
