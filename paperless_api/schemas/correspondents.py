"""Correspondent models."""

from enum import IntEnum

from pydantic import BaseModel


class MatchingAlgorithm(IntEnum):
    """How Paperless auto-assigns an entity to new documents."""

    NONE = 0
    ANY_WORD = 1
    ALL_WORDS = 2
    EXACT_MATCH = 3
    REGULAR_EXPRESSION = 4
    FUZZY_WORD = 5
    AUTOMATIC = 6


class Correspondent(BaseModel):
    """A correspondent from the Paperless-ngx API."""

    id: int
    slug: str
    name: str
    match: str = ""
    matching_algorithm: MatchingAlgorithm = MatchingAlgorithm.NONE
    is_insensitive: bool = True
    document_count: int = 0
    last_correspondence: str | None = None


class CorrespondentCreation(BaseModel):
    """Fields accepted when creating a correspondent. Unset fields use server defaults."""

    name: str
    slug: str | None = None
    match: str | None = None
    matching_algorithm: MatchingAlgorithm | None = None
    is_insensitive: bool | None = None
