"""Request helpers shared by the resource clients.

Every helper surfaces a non-2xx response as ``PaperlessRequestError`` carrying
the response body. Nothing here retries.
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from typing import TypeVar

import httpx
from pydantic import BaseModel

from paperless_api.errors import PaperlessRequestError
from paperless_api.schemas.pagination import PaginatedList

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


def ensure_success(response: httpx.Response) -> None:
    """Raise ``PaperlessRequestError`` unless the response has a 2xx status."""
    if response.is_success:
        return
    raise PaperlessRequestError(response.status_code, str(response.url), response.text)


def with_params(path: str, params: dict[str, str]) -> str:
    """Merge ``params`` into the query string of a relative ``path``."""
    if not params:
        return path
    return str(httpx.URL(path).copy_merge_params(params))


async def get_optional(http: httpx.AsyncClient, path: str, model: type[T]) -> T | None:
    """GET a single entity. A 404 means it does not exist and returns None."""
    response = await http.get(path)
    if response.status_code == httpx.codes.NOT_FOUND:
        return None
    ensure_success(response)
    return model.model_validate(response.json())


async def post_json(http: httpx.AsyncClient, path: str, payload: BaseModel, model: type[T]) -> T:
    """POST ``payload`` as JSON and parse the created entity."""
    response = await http.post(path, json=payload.model_dump(mode="json", exclude_none=True))
    ensure_success(response)
    return model.model_validate(response.json())


async def patch_json(http: httpx.AsyncClient, path: str, payload: dict, model: type[T]) -> T:
    """PATCH a JSON payload and parse the updated entity."""
    response = await http.patch(path, json=payload)
    ensure_success(response)
    return model.model_validate(response.json())


async def delete(http: httpx.AsyncClient, path: str) -> None:
    response = await http.delete(path)
    ensure_success(response)


def next_page_path(next_url: str | None, base_url: httpx.URL) -> str | None:
    """Reduce an absolute ``next`` link to a path relative to ``base_url``.

    Only the path and query are reused. When the client is mounted below a
    sub-path (``https://host/paperless/``) that prefix is stripped, since
    httpx joins it back on.
    """
    if next_url is None:
        return None
    path = httpx.URL(next_url).raw_path.decode("ascii")
    base_path = base_url.raw_path.decode("ascii")
    if base_path != "/" and path.startswith(base_path):
        path = path[len(base_path):]
    return path


async def paginate(
    http: httpx.AsyncClient,
    path: str,
    model: type[T],
    *,
    cancel_event: asyncio.Event | None = None,
) -> AsyncIterator[T]:
    """Yield every item of a paginated listing, following ``next`` links lazily.

    Each call starts a new traversal from ``path``; pages are never cached.
    A page without ``results`` (or an empty body) ends the sequence quietly.
    ``cancel_event`` is checked before each page fetch; once set the
    sequence ends without error.

    Raises:
        PaperlessRequestError: A page request returned a non-2xx status.
    """
    page_type = PaginatedList[model]
    next_path: str | None = path

    while next_path is not None:
        if cancel_event is not None and cancel_event.is_set():
            logger.debug("Pagination of %s cancelled before fetching %s", path, next_path)
            return

        logger.debug("Fetching page %s", next_path)
        response = await http.get(next_path)
        ensure_success(response)

        data = response.json() if response.content else None
        if data is None:
            return
        page = page_type.model_validate(data)
        if page.results is None:
            return

        for item in page.results:
            yield item

        next_path = next_page_path(page.next, http.base_url)
