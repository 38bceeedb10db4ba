"""Correspondent endpoints."""

import asyncio
from collections.abc import AsyncIterator

import httpx

from paperless_api import routes
from paperless_api.http import delete, get_optional, paginate, post_json
from paperless_api.schemas.correspondents import Correspondent, CorrespondentCreation


class CorrespondentClient:
    """Typed access to ``/api/correspondents/``."""

    def __init__(self, http: httpx.AsyncClient) -> None:
        self._http = http

    def get_all(
        self,
        *,
        page_size: int | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> AsyncIterator[Correspondent]:
        """Iterate over all correspondents, fetching ``page_size`` per request."""
        path = routes.paged(routes.CORRESPONDENTS, page_size)
        return paginate(self._http, path, Correspondent, cancel_event=cancel_event)

    async def get(self, correspondent_id: int) -> Correspondent | None:
        """Fetch a correspondent, or None if it does not exist."""
        return await get_optional(self._http, routes.by_id(routes.CORRESPONDENTS, correspondent_id), Correspondent)

    async def create(self, correspondent: CorrespondentCreation) -> Correspondent:
        return await post_json(self._http, routes.CORRESPONDENTS, correspondent, Correspondent)

    async def delete(self, correspondent_id: int) -> None:
        await delete(self._http, routes.by_id(routes.CORRESPONDENTS, correspondent_id))
