"""Paginated list envelope returned by every Paperless listing endpoint."""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class PaginatedList(BaseModel, Generic[T]):
    """One page of a listing.

    ``next`` and ``previous`` are absolute URLs; ``next`` is set only while
    more pages remain. ``results`` is optional so that a malformed page can
    be told apart from an empty one.
    """

    count: int = 0
    next: str | None = None
    previous: str | None = None
    results: list[T] | None = None
