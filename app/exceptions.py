# =============================================================================
# app/exceptions.py - Custom Exceptions and Exception Handlers
# =============================================================================
# Centralized error handling for the API.
#
# Every error leaves the service in the same envelope:
#   {"error": "...", "message": "...", "app_id": "...", "timestamp": "..."}
#
# Taxonomy:
# - ValidationFailedError: bad or missing input (400)
# - UpstreamError: App Store / ASO Market failure (502)
# - InternalServerError: anything unexpected (500, generic message)
# =============================================================================

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.models.requests import ErrorResponse
from lib.utils import utc_now_iso

logger = logging.getLogger(__name__)


def error_envelope(
    error: str,
    message: str | None = None,
    app_id: str | None = None,
) -> dict:
    """Build the JSON body shared by every error response."""
    return ErrorResponse(
        error=error,
        message=message,
        app_id=app_id,
        timestamp=utc_now_iso(),
    ).model_dump(exclude_none=True)


class ReviewsAPIException(Exception):
    """
    Base exception for the Reviews API.

    All custom exceptions inherit from this class and know the HTTP
    status and error label they map to.
    """

    def __init__(
        self,
        message: str,
        error: str = "Internal Server Error",
        status_code: int = 500,
        app_id: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.error = error
        self.status_code = status_code
        self.app_id = app_id

    def to_dict(self) -> dict:
        """Convert exception to the error envelope."""
        return error_envelope(self.error, self.message, self.app_id)


class ValidationFailedError(ReviewsAPIException):
    """Raised when caller input fails validation. Never retried."""

    def __init__(self, errors: list[str], app_id: str | None = None):
        super().__init__(
            message=", ".join(errors),
            error="Validation Error",
            status_code=400,
            app_id=app_id,
        )
        self.errors = errors


class UpstreamError(ReviewsAPIException):
    """
    Raised when an upstream source fails.

    Covers non-2xx statuses, empty result sets, malformed payloads and
    transport errors (timeouts included).
    """

    def __init__(
        self,
        message: str,
        app_id: str | None = None,
        upstream_status: int | None = None,
    ):
        super().__init__(
            message=message,
            error="Upstream Error",
            status_code=502,
            app_id=app_id,
        )
        self.upstream_status = upstream_status


class InternalServerError(ReviewsAPIException):
    """Raised for unexpected failures. The original error is logged, never returned."""

    def __init__(self, app_id: str | None = None):
        super().__init__(
            message="An unexpected error occurred",
            error="Internal Server Error",
            status_code=500,
            app_id=app_id,
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def reviews_api_exception_handler(
    request: Request,
    exc: ReviewsAPIException
) -> JSONResponse:
    """Convert ReviewsAPIException to its JSON envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle framework-level request validation errors (e.g. a body that
    isn't JSON).

    Reported with the same 400 envelope as our own validation.
    """
    messages = [
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content=error_envelope("Validation Error", ", ".join(messages))
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """Last-resort handler: log the failure, return the generic 500 envelope."""
    logger.exception(f"Unexpected error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content=error_envelope("Internal Server Error", "An unexpected error occurred"),
        headers={"Access-Control-Allow-Origin": "*"},
    )
