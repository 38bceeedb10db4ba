"""Tag endpoints."""

import asyncio
from collections.abc import AsyncIterator

import httpx

from paperless_api import routes
from paperless_api.http import delete, get_optional, paginate, post_json
from paperless_api.schemas.tags import Tag, TagCreation


class TagClient:
    """Typed access to ``/api/tags/``."""

    def __init__(self, http: httpx.AsyncClient) -> None:
        self._http = http

    def get_all(
        self,
        *,
        page_size: int | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> AsyncIterator[Tag]:
        return paginate(self._http, routes.paged(routes.TAGS, page_size), Tag, cancel_event=cancel_event)

    async def get(self, tag_id: int) -> Tag | None:
        return await get_optional(self._http, routes.by_id(routes.TAGS, tag_id), Tag)

    async def create(self, tag: TagCreation) -> Tag:
        return await post_json(self._http, routes.TAGS, tag, Tag)

    async def delete(self, tag_id: int) -> None:
        await delete(self._http, routes.by_id(routes.TAGS, tag_id))
