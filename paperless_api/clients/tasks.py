"""Background task lookups used to follow document imports."""

import logging
from uuid import UUID

import httpx
from pydantic import TypeAdapter

from paperless_api import routes
from paperless_api.http import ensure_success
from paperless_api.schemas.tasks import PaperlessTask

logger = logging.getLogger(__name__)

_task_list = TypeAdapter(list[PaperlessTask])


class TaskClient:
    """Typed access to ``/api/tasks/``.

    ``get`` performs exactly one request; callers decide whether and how
    often to poll.
    """

    def __init__(self, http: httpx.AsyncClient) -> None:
        self._http = http

    async def get_all(self) -> list[PaperlessTask]:
        """Fetch all tasks the server still tracks. The endpoint is not paginated."""
        response = await self._http.get(routes.TASKS)
        ensure_success(response)
        return _task_list.validate_python(response.json())

    async def get(self, task_id: UUID) -> PaperlessTask | None:
        """Fetch the task with ``task_id``, or None if the server does not know it."""
        response = await self._http.get(routes.task(task_id))
        ensure_success(response)
        tasks = _task_list.validate_python(response.json())
        if not tasks:
            logger.debug("Task %s not found", task_id)
            return None
        task = tasks[0]
        logger.debug("Task %s is %s", task_id, task.status)
        return task
