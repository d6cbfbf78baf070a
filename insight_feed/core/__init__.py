"""Core infrastructure modules."""

from .exceptions import (
    InsightFeedException,
    ValidationError,
    NotFoundError,
    DuplicateError,
    QuotaExceededError,
    TransientNetworkError,
    CatalogRequestError,
    VersionControlStateError,
    PublishInProgressError,
)
from .logging import setup_logging, get_logger

__all__ = [
    "InsightFeedException",
    "ValidationError",
    "NotFoundError",
    "DuplicateError",
    "QuotaExceededError",
    "TransientNetworkError",
    "CatalogRequestError",
    "VersionControlStateError",
    "PublishInProgressError",
    "setup_logging",
    "get_logger",
]
