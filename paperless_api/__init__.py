"""Typed async client for the Paperless-ngx REST API."""

from paperless_api.client import PaperlessClient
from paperless_api.errors import (
    ConfigurationError,
    CustomFieldError,
    PaperlessError,
    PaperlessRequestError,
    UnexpectedTaskStatusError,
)
from paperless_api.schemas.documents import (
    DocumentCreated,
    DocumentCreation,
    DocumentCreationResult,
    ImportFailed,
    ImportStarted,
)

__all__ = [
    "ConfigurationError",
    "CustomFieldError",
    "DocumentCreated",
    "DocumentCreation",
    "DocumentCreationResult",
    "ImportFailed",
    "ImportStarted",
    "PaperlessClient",
    "PaperlessError",
    "PaperlessRequestError",
    "UnexpectedTaskStatusError",
]
