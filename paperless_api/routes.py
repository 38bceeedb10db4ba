"""Relative API paths, resolved against the client's base URL."""

from uuid import UUID

DOCUMENTS = "api/documents/"
DOCUMENT_UPLOAD = "api/documents/post_document/"
CORRESPONDENTS = "api/correspondents/"
TAGS = "api/tags/"
CUSTOM_FIELDS = "api/custom_fields/"
TASKS = "api/tasks/"


def paged(path: str, page_size: int | None) -> str:
    """Return ``path`` with a ``page_size`` query when one is given."""
    if page_size is None:
        return path
    return f"{path}?page_size={page_size}"


def by_id(path: str, entity_id: int) -> str:
    return f"{path}{entity_id}/"


def document_metadata(document_id: int) -> str:
    return f"{DOCUMENTS}{document_id}/metadata/"


def document_download(document_id: int, *, original: bool = False) -> str:
    path = f"{DOCUMENTS}{document_id}/download/"
    return f"{path}?original=true" if original else path


def document_preview(document_id: int, *, original: bool = False) -> str:
    path = f"{DOCUMENTS}{document_id}/preview/"
    return f"{path}?original=true" if original else path


def document_thumbnail(document_id: int) -> str:
    return f"{DOCUMENTS}{document_id}/thumb/"


def task(task_id: UUID) -> str:
    return f"{TASKS}?task_id={task_id}"
