"""
Custom exception handlers for consistent API error responses.

Every service error is rendered as ``{"detail", "error_code", "path"}`` so
clients can branch on ``error_code`` without parsing messages.
"""

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import logging

from .error_handling import APIError

logger = logging.getLogger(__name__)


async def handle_api_error(request: Request, exc: APIError) -> JSONResponse:
    """Handle service-layer API errors"""
    logger.warning(
        f"{exc.error_code} at {request.url.path}: {exc.message}",
        extra={"status_code": exc.status_code, "details": exc.details},
    )
    content = exc.to_dict()
    content["path"] = str(request.url.path)
    return JSONResponse(status_code=exc.status_code, content=content)


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render malformed or missing request fields as 400 invalid_request"""
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    logger.warning(f"Invalid request at {request.url.path}: {errors}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": "Invalid request data",
            "error_code": "invalid_request",
            "details": {"validation_errors": errors},
            "path": str(request.url.path),
        },
    )


def register_exception_handlers(app):
    """Register all exception handlers with the FastAPI app"""
    app.add_exception_handler(APIError, handle_api_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
