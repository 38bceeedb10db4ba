"""Document endpoints, including upload with import task tracking."""

import asyncio
import logging
from collections.abc import AsyncIterator
from typing import TypeVar
from urllib.parse import unquote
from uuid import UUID

import httpx
from pydantic import BaseModel

from paperless_api import routes
from paperless_api.clients.tasks import TaskClient
from paperless_api.custom_fields import CustomFieldRegistry
from paperless_api.errors import UnexpectedTaskStatusError
from paperless_api.http import (
    delete,
    ensure_success,
    get_optional,
    paginate,
    patch_json,
    post_json,
    with_params,
)
from paperless_api.schemas.custom_fields import CustomField, CustomFieldCreation
from paperless_api.schemas.documents import (
    Document,
    DocumentContent,
    DocumentCreated,
    DocumentCreation,
    DocumentCreationResult,
    DocumentMetadata,
    DocumentUpdate,
    ImportFailed,
    ImportStarted,
    TypedDocument,
)
from paperless_api.schemas.filters import DocumentFilter
from paperless_api.schemas.tasks import PaperlessTask, PaperlessTaskStatus

logger = logging.getLogger(__name__)

FieldsT = TypeVar("FieldsT", bound=BaseModel)

# Up to and including this version the upload endpoint did not return the
# import task id, so the created document cannot be resolved.
DOCUMENT_ID_VERSION = (1, 9, 2)


def parse_version(header: str | None) -> tuple[int, ...] | None:
    """Parse an ``x-version`` header such as ``2.3.1``; None if absent or malformed."""
    if header is None:
        return None
    parts = header.strip().split(".")
    if not 2 <= len(parts) <= 4 or not all(part.isdigit() for part in parts):
        return None
    return tuple(int(part) for part in parts)


def resolve_import(task_id: UUID, task: PaperlessTask | None) -> DocumentCreationResult:
    """Map the final state of an import task to a creation result.

    A related document wins over the status. ``SUCCESS`` without a document
    id happens on some server versions and is reported as a failure.

    Raises:
        UnexpectedTaskStatusError: The task is neither SUCCESS nor FAILURE (including REVOKED).
    """
    match task:
        case None:
            return ImportFailed(result=f"Could not find the import task by the given id {task_id}")
        case PaperlessTask(related_document=int(document_id)):
            return DocumentCreated(id=document_id)
        case PaperlessTask(status=PaperlessTaskStatus.SUCCESS):
            return ImportFailed(
                result=f"Task status is {PaperlessTaskStatus.SUCCESS.value}, but document id was not given"
            )
        case PaperlessTask(status=PaperlessTaskStatus.FAILURE):
            return ImportFailed(result=task.result)
    raise UnexpectedTaskStatusError(task_id, task.status)


def _upload_fields(document: DocumentCreation) -> dict[str, str | list[str]]:
    """Multipart form fields for the metadata that was actually given."""
    data: dict[str, str | list[str]] = {}
    if document.title is not None:
        data["title"] = document.title
    if document.created is not None:
        data["created"] = document.created.isoformat()
    if document.correspondent_id is not None:
        data["correspondent"] = str(document.correspondent_id)
    if document.document_type_id is not None:
        data["document_type"] = str(document.document_type_id)
    if document.storage_path_id is not None:
        data["storage_path"] = str(document.storage_path_id)
    if document.tag_ids:
        data["tags"] = [str(tag_id) for tag_id in document.tag_ids]
    if document.archive_serial_number is not None:
        data["archive_serial_number"] = str(document.archive_serial_number)
    return data


def _filename_from_disposition(header: str | None) -> str | None:
    """Extract the filename from a Content-Disposition header, preferring ``filename*``."""
    if not header:
        return None
    filename = None
    for part in header.split(";"):
        key, _, value = part.strip().partition("=")
        key = key.lower()
        if key == "filename*":
            # RFC 5987: charset'language'percent-encoded
            return unquote(value.split("'", 2)[-1])
        if key == "filename":
            filename = value.strip('"')
    return filename


class DocumentClient:
    """Typed access to ``/api/documents/`` and ``/api/custom_fields/``.

    ``create`` uploads a file and, on servers that report the import task,
    polls that task every ``task_poll_delay`` seconds until it finishes. By
    default there is no bound on the number of polls, so a server that never
    completes the task keeps ``create`` waiting; set
    ``task_poll_max_attempts`` to a positive count to give up and return
    ``ImportFailed`` (0 or None polls without bound).
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        tasks: TaskClient,
        registry: CustomFieldRegistry,
        *,
        task_poll_delay: float = 1.0,
        task_poll_max_attempts: int | None = None,
    ) -> None:
        self._http = http
        self._tasks = tasks
        self._registry = registry
        self._task_poll_delay = task_poll_delay
        if task_poll_max_attempts is not None and task_poll_max_attempts < 0:
            raise ValueError(f"task_poll_max_attempts must be >= 0, got {task_poll_max_attempts}")
        # 0 means unbounded, as in the settings file.
        self._task_poll_max_attempts = task_poll_max_attempts or None

    @property
    def registry(self) -> CustomFieldRegistry:
        return self._registry

    # ------------------------------------------------------------------
    # Listing and lookup
    # ------------------------------------------------------------------

    def get_all(
        self,
        *,
        document_filter: DocumentFilter | None = None,
        page_size: int | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> AsyncIterator[Document]:
        """Iterate over all documents matching ``document_filter``.

        Pages are fetched lazily as the iterator is consumed; stopping early
        fetches nothing further.
        """
        return paginate(
            self._http,
            self._listing_path(document_filter, page_size),
            Document,
            cancel_event=cancel_event,
        )

    async def get_all_typed(
        self,
        fields_model: type[FieldsT],
        *,
        document_filter: DocumentFilter | None = None,
        page_size: int | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> AsyncIterator[TypedDocument[FieldsT]]:
        """Like ``get_all``, with custom fields decoded into ``fields_model``."""
        await self._ensure_custom_fields()
        documents = self.get_all(
            document_filter=document_filter,
            page_size=page_size,
            cancel_event=cancel_event,
        )
        async for document in documents:
            yield self._typed(document, fields_model)

    async def get(self, document_id: int) -> Document | None:
        """Fetch a document, or None if it does not exist."""
        return await get_optional(self._http, routes.by_id(routes.DOCUMENTS, document_id), Document)

    async def get_typed(self, document_id: int, fields_model: type[FieldsT]) -> TypedDocument[FieldsT] | None:
        await self._ensure_custom_fields()
        document = await self.get(document_id)
        if document is None:
            return None
        return self._typed(document, fields_model)

    async def get_metadata(self, document_id: int) -> DocumentMetadata:
        response = await self._http.get(routes.document_metadata(document_id))
        ensure_success(response)
        return DocumentMetadata.model_validate(response.json())

    # ------------------------------------------------------------------
    # Downloads
    # ------------------------------------------------------------------

    async def download(self, document_id: int) -> DocumentContent:
        """Download the archived (OCR'd) version of a document."""
        return await self._download(routes.document_download(document_id))

    async def download_original(self, document_id: int) -> DocumentContent:
        return await self._download(routes.document_download(document_id, original=True))

    async def download_preview(self, document_id: int) -> DocumentContent:
        """Fetch the archived file for inline display."""
        return await self._download(routes.document_preview(document_id))

    async def download_original_preview(self, document_id: int) -> DocumentContent:
        return await self._download(routes.document_preview(document_id, original=True))

    async def download_thumbnail(self, document_id: int) -> DocumentContent:
        return await self._download(routes.document_thumbnail(document_id))

    async def _download(self, path: str) -> DocumentContent:
        response = await self._http.get(path)
        ensure_success(response)
        return DocumentContent(
            content=response.content,
            content_type=response.headers.get("content-type", "application/octet-stream"),
            filename=_filename_from_disposition(response.headers.get("content-disposition")),
        )

    # ------------------------------------------------------------------
    # Create, update, delete
    # ------------------------------------------------------------------

    async def create(self, document: DocumentCreation) -> DocumentCreationResult:
        """Upload a document and wait for its import to finish.

        Uses ``POST /api/documents/post_document/`` with multipart form data.
        Servers newer than 1.9.2 answer with the import task id, which is
        polled until the task succeeds or fails.

        Returns:
            ``ImportStarted`` for servers that do not report the task,
            ``DocumentCreated`` with the new id, or ``ImportFailed`` with the
            server's reason (duplicates, unsupported files, ...).

        Raises:
            PaperlessRequestError: The upload or a task lookup was rejected.
            UnexpectedTaskStatusError: The task was revoked or the task API returned an impossible state.
        """
        response = await self._http.post(
            routes.DOCUMENT_UPLOAD,
            data=_upload_fields(document),
            files={"document": (document.filename, document.document, "application/octet-stream")},
        )
        ensure_success(response)

        version_header = response.headers.get("x-version")
        version = parse_version(version_header)
        if version is None or version <= DOCUMENT_ID_VERSION:
            logger.info(
                "Uploaded %s; server version %s does not report import tasks",
                document.filename,
                version_header,
            )
            return ImportStarted()

        # JSON string body, or bare text.
        task_id = UUID(response.text.strip().strip('"'))
        logger.debug("Uploaded %s, waiting for import task %s", document.filename, task_id)

        task = await self._tasks.get(task_id)
        polls = 1
        while task is not None and not task.status.is_ready:
            if self._task_poll_max_attempts is not None and polls >= self._task_poll_max_attempts:
                logger.warning("Import task %s still %s after %d polls", task_id, task.status, polls)
                return ImportFailed(result=f"Task {task_id} did not complete after {polls} polls")
            await asyncio.sleep(self._task_poll_delay)
            task = await self._tasks.get(task_id)
            polls += 1

        result = resolve_import(task_id, task)
        logger.info("Import of %s finished: %s", document.filename, result)
        return result

    async def update(self, document_id: int, update: DocumentUpdate) -> Document:
        """PATCH a document. Only fields set on ``update`` are sent."""
        payload = update.model_dump(mode="json", exclude_none=True)
        return await patch_json(self._http, routes.by_id(routes.DOCUMENTS, document_id), payload, Document)

    async def update_typed(
        self,
        document_id: int,
        update: DocumentUpdate,
        custom_fields: FieldsT,
    ) -> TypedDocument[FieldsT]:
        """PATCH a document, setting the custom fields given on ``custom_fields``."""
        await self._ensure_custom_fields()
        payload = update.model_dump(mode="json", exclude_none=True, exclude={"custom_fields"})
        payload["custom_fields"] = [
            value.model_dump(mode="json") for value in self._registry.encode(custom_fields)
        ]
        document = await patch_json(self._http, routes.by_id(routes.DOCUMENTS, document_id), payload, Document)
        return self._typed(document, type(custom_fields))

    async def delete(self, document_id: int) -> None:
        await delete(self._http, routes.by_id(routes.DOCUMENTS, document_id))

    # ------------------------------------------------------------------
    # Custom fields
    # ------------------------------------------------------------------

    def get_custom_fields(
        self,
        *,
        page_size: int | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> AsyncIterator[CustomField]:
        """Iterate over all custom field definitions, recording each in the registry."""
        return self._register_fields(routes.paged(routes.CUSTOM_FIELDS, page_size), cancel_event)

    async def create_custom_field(self, field: CustomFieldCreation) -> CustomField:
        created = await post_json(self._http, routes.CUSTOM_FIELDS, field, CustomField)
        self._registry.add(created)
        return created

    async def _register_fields(
        self,
        path: str,
        cancel_event: asyncio.Event | None,
    ) -> AsyncIterator[CustomField]:
        async for field in paginate(self._http, path, CustomField, cancel_event=cancel_event):
            self._registry.add(field)
            yield field

    async def _ensure_custom_fields(self) -> None:
        if self._registry.is_populated:
            return
        logger.debug("Custom field registry is empty, loading definitions")
        async for _ in self.get_custom_fields():
            pass

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _listing_path(document_filter: DocumentFilter | None, page_size: int | None) -> str:
        path = routes.paged(routes.DOCUMENTS, page_size)
        if document_filter is None:
            return path
        return with_params(path, document_filter.to_params())

    def _typed(self, document: Document, fields_model: type[FieldsT]) -> TypedDocument[FieldsT]:
        data = document.model_dump(exclude={"custom_fields"})
        data["custom_fields"] = self._registry.decode(document.custom_fields, fields_model)
        return TypedDocument[fields_model].model_validate(data)
