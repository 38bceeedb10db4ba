"""Document listing filter, serialized into query parameters."""

from datetime import date

from pydantic import BaseModel, Field


class DocumentFilter(BaseModel):
    """Subset of the ``/api/documents/`` filter parameters.

    Anything not modelled here can be passed through ``extra`` using the
    server's own parameter names (e.g. ``{"tags__isnull": "true"}``).
    """

    query: str | None = None
    title__icontains: str | None = None
    content__icontains: str | None = None
    correspondent__id: int | None = None
    document_type__id: int | None = None
    tags__id__all: list[int] | None = None
    created__date__gt: date | None = None
    created__date__lt: date | None = None
    archive_serial_number: int | None = None
    ordering: str | None = None
    extra: dict[str, str] = Field(default_factory=dict)

    def to_params(self) -> dict[str, str]:
        """Return the filter as query parameters, skipping unset fields."""
        params: dict[str, str] = {}
        for name, value in self.model_dump(exclude={"extra"}, exclude_none=True).items():
            if isinstance(value, list):
                params[name] = ",".join(str(v) for v in value)
            elif isinstance(value, date):
                params[name] = value.isoformat()
            elif isinstance(value, bool):
                params[name] = str(value).lower()
            else:
                params[name] = str(value)
        params.update(self.extra)
        return params
