import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .agents.idea_validation.http_client import close_client
from .agents.idea_validation.prompts import enabled_tool_ids
from .api_errors import ApiError, api_error_handler
from .config import (
    get_cors_origins,
    get_gemini_model,
    get_log_level,
    is_debug,
    is_gemini_available,
)
from .database import init_db
from .routes.export import router as export_router
from .routes.reports import router as reports_router
from .routes.session import router as session_router
from .routes.validation import router as validation_router
from .services.export_service import is_pdf_export_available

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, get_log_level(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    init_db()

    # Startup
    logger.info("Starting Business Idea Validator")
    logger.info("   Gemini Key:   %s", f"Configured ({get_gemini_model()})" if is_gemini_available() else "Not set (validation disabled)")
    logger.info("   Documate Key: %s", "Configured" if is_pdf_export_available() else "Not set (HTML export)")
    logger.info("   Tools:        %s", ", ".join(enabled_tool_ids()))

    yield

    await close_client()
    logger.info("Shutting down Business Idea Validator")


app = FastAPI(
    title="Business Idea Validator",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(ApiError, api_error_handler)

app.include_router(validation_router)
app.include_router(reports_router)
app.include_router(export_router)
app.include_router(session_router)


@app.get(
    "/",
    summary="API Root",
    description="Welcome endpoint with API information",
    tags=["General"]
)
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Business Idea Validator",
        "version": __version__,
        "description": "AI-powered business idea validation",
        "docs": "/docs",
        "endpoints": {
            "tools": "GET /tools - Available validation tools",
            "validate": "POST /validate-idea - Validate a business idea",
            "reports": "GET|POST /reports - Saved validation reports",
            "export": "POST /generate-pdf-report - Download a report",
            "health": "GET /health - Service health check",
        }
    }


@app.get(
    "/health",
    summary="Global Health Check",
    description="Check if the API server is running",
    tags=["General"]
)
async def health():
    """Global health check endpoint."""
    return {
        "status": "healthy",
        "service": "idea-validator",
        "version": __version__,
        "gemini": is_gemini_available(),
        "pdfExport": is_pdf_export_available(),
    }


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled errors."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "details": str(exc) if is_debug() else "An unexpected error occurred",
        }
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "idea_validator.main:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        reload=is_debug(),
    )
