"""Models for Paperless background tasks (document imports)."""

from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class PaperlessTaskStatus(StrEnum):
    """Celery task states reported by Paperless-ngx."""

    PENDING = "PENDING"
    STARTED = "STARTED"
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"
    RETRY = "RETRY"
    REVOKED = "REVOKED"

    @property
    def is_ready(self) -> bool:
        """True once the task will not change state again."""
        return self in (PaperlessTaskStatus.SUCCESS, PaperlessTaskStatus.FAILURE, PaperlessTaskStatus.REVOKED)


class PaperlessTask(BaseModel):
    """A background task, as returned by ``/api/tasks/``.

    ``related_document`` is only set once an import has succeeded. Some
    server versions send it as a string.
    """

    id: UUID = Field(alias="task_id")
    status: PaperlessTaskStatus
    task_file_name: str | None = None
    date_created: str | None = None
    date_done: str | None = None
    result: str | None = None
    acknowledged: bool = False
    related_document: int | None = None

    model_config = ConfigDict(populate_by_name=True)
