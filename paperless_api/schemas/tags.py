"""Tag models."""

from pydantic import BaseModel

from paperless_api.schemas.correspondents import MatchingAlgorithm


class Tag(BaseModel):
    """A tag from the Paperless-ngx API."""

    id: int
    slug: str
    name: str
    color: str = "#a6cee3"
    text_color: str = "#000000"
    match: str = ""
    matching_algorithm: MatchingAlgorithm = MatchingAlgorithm.NONE
    is_insensitive: bool = True
    is_inbox_tag: bool = False
    document_count: int = 0


class TagCreation(BaseModel):
    """Fields accepted when creating a tag."""

    name: str
    slug: str | None = None
    color: str | None = None
    match: str | None = None
    matching_algorithm: MatchingAlgorithm | None = None
    is_insensitive: bool | None = None
    is_inbox_tag: bool | None = None
