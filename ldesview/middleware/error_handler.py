"""Structured error responses."""
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
import structlog
from .correlation import get_correlation_id
from ..errors import LdesViewError

log = structlog.get_logger()


def error_body(request: Request, error: str, message: str, status_code: int) -> dict:
    return {
        "error": error,
        "message": message,
        "status_code": status_code,
        "correlation_id": get_correlation_id(),
        "path": str(request.url.path),
    }


async def ldes_error_handler(request: Request, exc: LdesViewError) -> JSONResponse:
    """Map typed view errors to their HTTP status."""
    if exc.status_code >= 500:
        log.error("view.error", error=exc.error, detail=exc.message, path=request.url.path)
    else:
        log.warning("view.rejected", error=exc.error, detail=exc.message, path=request.url.path)
        metrics = getattr(request.app.state, "metrics", None)
        if metrics is not None:
            metrics.record_lookup_failure(exc.error)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(request, exc.error, exc.message, exc.status_code),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LdesViewError, ldes_error_handler)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Turns unhandled exceptions into structured 500 responses."""

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            log.error(
                "unhandled.exception",
                error=str(exc),
                error_type=exc.__class__.__name__,
                path=request.url.path,
                exc_info=True
            )
            return JSONResponse(
                status_code=500,
                content=error_body(request, "InternalServerError", "An unexpected error occurred", 500),
            )
