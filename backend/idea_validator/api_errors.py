"""HTTP-facing error carrying the ``{error, details}`` body the client expects."""

from fastapi import Request
from fastapi.responses import JSONResponse


class ApiError(Exception):
    def __init__(self, status_code: int, error: str, details: str = ""):
        self.status_code = status_code
        self.error = error
        self.details = details
        super().__init__(error)


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.error, "details": exc.details},
    )
