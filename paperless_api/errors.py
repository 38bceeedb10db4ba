"""Exceptions raised by the Paperless client."""


class PaperlessError(Exception):
    """Base exception for Paperless client errors."""


class PaperlessRequestError(PaperlessError):
    """The API answered with a non-success status.

    The message is the raw response body, which is where Paperless puts
    its validation and error details.
    """

    def __init__(self, status_code: int, url: str, body: str) -> None:
        self.status_code = status_code
        self.url = url
        self.body = body
        super().__init__(body or f"Response status code does not indicate success: {status_code}")


class CustomFieldError(PaperlessError):
    """A custom field value could not be mapped through the registry."""


class UnexpectedTaskStatusError(PaperlessError):
    """An import task left the poll loop in a non-terminal state.

    This means the task API no longer behaves as the client expects and is
    not a recoverable condition.
    """

    def __init__(self, task_id: object, status: object) -> None:
        self.task_id = task_id
        self.status = status
        super().__init__(f"Unexpected status {status} for import task {task_id}")


class ConfigurationError(PaperlessError):
    """The settings file or ``PAPERLESS_*`` environment could not be loaded."""
