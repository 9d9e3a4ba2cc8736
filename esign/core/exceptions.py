import uuid
import traceback
from typing import Any, Dict, Optional
from fastapi import Request, status
from fastapi.responses import JSONResponse

from esign.core.config import settings
from esign.core.logging import get_logger

logger = get_logger(__name__)


class ESignError(Exception):
    """Base exception for the e-signature application."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code or "INTERNAL_ERROR"
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(ESignError):
    """Input validation failed before reaching the stores."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        field: Optional[str] = None,
    ):
        details = {}
        if operation:
            details["operation"] = operation
        if field:
            details["field"] = field
        super().__init__(message, "VALIDATION_ERROR", details)
        self.operation = operation
        self.field = field


class NotFoundError(ESignError):
    """A lookup needed to complete an operation returned nothing."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "NOT_FOUND", details)


class TokenSpaceExhaustedError(ESignError):
    """No unused signing token could be generated."""

    def __init__(
        self,
        message: str = "Unable to generate a unique signing token",
        attempts: Optional[int] = None,
    ):
        details = {"attempts": attempts} if attempts is not None else None
        super().__init__(message, "TOKEN_SPACE_EXHAUSTED", details)


def create_error_response(
    status_code: int,
    message: str,
    error_code: str = "INTERNAL_ERROR",
    details: Optional[Dict[str, Any]] = None,
    error_id: Optional[str] = None,
    request_path: Optional[str] = None,
) -> JSONResponse:
    """Create standardized error response."""

    error_id = error_id or str(uuid.uuid4())[:8]

    error_response = {
        "error": {
            "code": error_code,
            "message": message,
            "error_id": error_id,
        }
    }

    if details:
        error_response["error"]["details"] = details

    if request_path:
        error_response["error"]["path"] = request_path

    return JSONResponse(status_code=status_code, content=error_response)


async def esign_exception_handler(request: Request, exc: ESignError) -> JSONResponse:
    """Handle custom application exceptions."""
    error_id = str(uuid.uuid4())[:8]

    status_code_map = {
        "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
        "NOT_FOUND": status.HTTP_404_NOT_FOUND,
        "TOKEN_SPACE_EXHAUSTED": status.HTTP_503_SERVICE_UNAVAILABLE,
    }

    status_code = status_code_map.get(
        exc.error_code, status.HTTP_500_INTERNAL_SERVER_ERROR
    )

    # 4xx at warning level
    log = logger.warning if status_code < 500 else logger.error
    log(
        "Application exception occurred",
        error_code=exc.error_code,
        message=exc.message,
        details=exc.details,
        path=request.url.path,
        method=request.method,
        error_id=error_id,
    )

    return create_error_response(
        status_code=status_code,
        message=exc.message,
        error_code=exc.error_code,
        details=exc.details,
        error_id=error_id,
        request_path=str(request.url.path),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all other unhandled exceptions."""
    error_id = str(uuid.uuid4())[:8]

    logger.error(
        "Unhandled exception occurred",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
        method=request.method,
        error_id=error_id,
        exc_info=True,
    )

    if settings.is_development:
        details = {
            "error_type": type(exc).__name__,
            "traceback": traceback.format_exc().split("\n"),
        }
        message = str(exc)
    else:
        # Generic message in production
        details = None
        message = "An unexpected error occurred"

    return create_error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        message=message,
        error_code="INTERNAL_ERROR",
        details=details,
        error_id=error_id,
        request_path=str(request.url.path),
    )


def setup_exception_handlers(app):
    """Setup all exception handlers for the FastAPI app."""

    app.add_exception_handler(ESignError, esign_exception_handler)

    # General exception handler (catch-all)
    app.add_exception_handler(Exception, general_exception_handler)
