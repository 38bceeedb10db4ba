"""Async client for the Paperless-ngx REST API."""

import logging

import httpx

from paperless_api.clients.correspondents import CorrespondentClient
from paperless_api.clients.documents import DocumentClient
from paperless_api.clients.tags import TagClient
from paperless_api.clients.tasks import TaskClient
from paperless_api.config import PaperlessSettings, get_settings
from paperless_api.custom_fields import CustomFieldRegistry

logger = logging.getLogger(__name__)


class PaperlessClient:
    """Entry point bundling the per-resource clients over one HTTP connection pool.

    Usage::

        async with PaperlessClient(base_url, token) as client:
            async for document in client.documents.get_all():
                ...

    Each instance owns its own ``CustomFieldRegistry`` unless one is passed
    in, so several clients can share field definitions deliberately.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        *,
        api_version: int = 5,
        timeout: float = 30.0,
        task_poll_delay: float = 1.0,
        task_poll_max_attempts: int | None = None,
        registry: CustomFieldRegistry | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={
                "Authorization": f"Token {token}",
                "Accept": f"application/json; version={api_version}",
            },
            timeout=timeout,
            transport=transport,
        )
        self.registry = registry if registry is not None else CustomFieldRegistry()
        self.tasks = TaskClient(self._client)
        self.correspondents = CorrespondentClient(self._client)
        self.tags = TagClient(self._client)
        self.documents = DocumentClient(
            self._client,
            self.tasks,
            self.registry,
            task_poll_delay=task_poll_delay,
            task_poll_max_attempts=task_poll_max_attempts,
        )

    @classmethod
    def from_config(cls, settings: PaperlessSettings | None = None) -> "PaperlessClient":
        """Build a client from ``settings``, loading them with ``get_settings()`` if omitted.

        Raises:
            ConfigurationError: The settings could not be loaded.
        """
        if settings is None:
            settings = get_settings()
        return cls(
            settings.base_url,
            settings.api_token,
            api_version=settings.api_version,
            timeout=settings.timeout,
            task_poll_delay=settings.task_poll_delay,
            task_poll_max_attempts=settings.task_poll_max_attempts,
        )

    async def __aenter__(self) -> "PaperlessClient":
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()
