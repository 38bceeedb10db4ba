"""Custom field definitions and their raw per-document values."""

from decimal import Decimal
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class CustomFieldType(StrEnum):
    """Data types a custom field can hold (``data_type`` on the wire)."""

    STRING = "string"
    URL = "url"
    DATE = "date"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    MONETARY = "monetary"
    DOCUMENT_LINK = "documentlink"
    SELECT = "select"


class SelectOption(BaseModel):
    """An option of a select field."""

    id: str
    label: str


class CustomFieldExtraData(BaseModel):
    # Servers before 2.15 send bare labels; their select values are list indexes.
    select_options: list[SelectOption | str] = Field(default_factory=list)
    default_currency: str | None = None


class CustomField(BaseModel):
    """A custom field definition."""

    id: int
    name: str
    data_type: CustomFieldType
    extra_data: CustomFieldExtraData | None = None
    document_count: int = 0


class CustomFieldCreation(BaseModel):
    """Fields accepted when creating a custom field."""

    name: str
    data_type: CustomFieldType
    extra_data: CustomFieldExtraData | None = None

    @classmethod
    def select(cls, name: str, labels: list[str]) -> "CustomFieldCreation":
        """Build a select field offering ``labels`` in order."""
        return cls(
            name=name,
            data_type=CustomFieldType.SELECT,
            extra_data=CustomFieldExtraData(select_options=list(labels)),
        )


class CustomFieldValue(BaseModel):
    """Raw wire shape of a custom field value attached to a document."""

    field: int
    value: Any = None


class Monetary(BaseModel):
    """A monetary amount, optionally tagged with an ISO 4217 currency code.

    Paperless stores these as ``"EUR12.50"``; older servers send a plain number.
    """

    amount: Decimal
    currency: str | None = None
