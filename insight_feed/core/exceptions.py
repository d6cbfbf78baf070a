"""
Global Exception Handlers

Custom exceptions and FastAPI exception handlers.
"""

from typing import Optional

from fastapi import Request
from fastapi.responses import JSONResponse

from ..config import get_settings
from .logging import get_logger

logger = get_logger(__name__)


class InsightFeedException(Exception):
    """Base exception for insight feed errors."""

    kind = "internal_error"

    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class ValidationError(InsightFeedException):
    """Malformed handle/URL or out-of-range input. Rejected before any network call."""

    kind = "validation_error"

    def __init__(self, message: str):
        super().__init__(message=message, status_code=400)


class NotFoundError(InsightFeedException):
    """Resource not found."""

    kind = "not_found"

    def __init__(self, resource: str, resource_id: str):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(
            message=f"{resource} not found: {resource_id}",
            status_code=404
        )


class DuplicateError(InsightFeedException):
    """Resource already registered."""

    kind = "duplicate"

    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            message=f"{resource} already exists: {resource_id}",
            status_code=409
        )


class QuotaExceededError(InsightFeedException):
    """API quota exceeded."""

    kind = "quota_exceeded"

    def __init__(self, api_name: str, detail: Optional[str] = None):
        message = f"{api_name} API quota exceeded. Try again tomorrow."
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message=message, status_code=429)


class TransientNetworkError(InsightFeedException):
    """Network/5xx failure that survived every retry."""

    kind = "transient_network_error"

    def __init__(self, message: str):
        super().__init__(message=message, status_code=503)


class CatalogRequestError(InsightFeedException):
    """Non-retryable 4xx from the catalog provider (other than 403/404)."""

    kind = "catalog_request_error"

    def __init__(self, upstream_status: int, message: str):
        self.upstream_status = upstream_status
        super().__init__(message=message, status_code=502)


class VersionControlStateError(InsightFeedException):
    """git status/add/commit/push failed for a reason other than 'no changes'."""

    kind = "version_control_error"

    def __init__(self, message: str, output: str = ""):
        self.output = output
        super().__init__(message=message, status_code=500)


class PublishInProgressError(InsightFeedException):
    """A publish run is already active; runs are never interleaved."""

    kind = "publish_in_progress"

    def __init__(self):
        super().__init__(
            message="A publish or fetch run is already in progress. Try again when it finishes.",
            status_code=409
        )


async def feed_exception_handler(
    request: Request,
    exc: InsightFeedException
) -> JSONResponse:
    """Handle InsightFeedException and return JSON response."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": True,
            "kind": exc.kind,
            "message": exc.message,
            "status_code": exc.status_code,
        }
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler. Implementation detail is only exposed outside production."""
    logger.error("unhandled_exception", path=request.url.path, error=str(exc), exc_info=exc)
    settings = get_settings()
    message = "An unexpected error occurred. Please try again."
    if not settings.is_production:
        message = f"{message} ({type(exc).__name__}: {exc})"
    return JSONResponse(
        status_code=500,
        content={
            "error": True,
            "kind": InsightFeedException.kind,
            "message": message,
            "status_code": 500,
        }
    )


def register_exception_handlers(app):
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(InsightFeedException, feed_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
