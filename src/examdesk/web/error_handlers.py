"""Global exception handlers.

Every error leaves the API as ``{"error": message}``:
    - ExamDeskError        -> its own http_status
    - HTTPException        -> its status code
    - RequestValidationError -> 400, with per-field details in "fields"
    - Exception (catch-all)  -> 500, logged with traceback
"""

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from examdesk.core.errors import ExamDeskError

logger = structlog.get_logger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(ExamDeskError)
    async def examdesk_error_handler(request: Request, exc: ExamDeskError):
        logger.info(
            "request.rejected",
            path=request.url.path,
            status_code=exc.http_status,
            error=exc.message,
        )
        return JSONResponse(status_code=exc.http_status, content={"error": exc.message})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        fields = [
            {
                "field": ".".join(str(loc) for loc in e["loc"] if loc != "body"),
                "message": e["msg"],
            }
            for e in exc.errors()
        ]
        logger.info("request.invalid", path=request.url.path, fields=fields)
        message = "; ".join(
            f"{f['field']}: {f['message']}" if f["field"] else f["message"] for f in fields
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": message or "Invalid request", "fields": fields},
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.exception("request.failed", path=request.url.path, error=str(exc))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(exc) or exc.__class__.__name__},
        )
