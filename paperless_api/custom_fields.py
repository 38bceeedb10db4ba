"""Custom field registry and typed value codec.

Documents carry custom field values as ``{"field": <id>, "value": ...}``.
Turning those into typed attributes needs the field definitions (name and
data type), which the registry caches per client.

Typed custom fields are plain pydantic models whose field names (or aliases)
match the custom field names on the server::

    class InvoiceFields(BaseModel):
        amount: Monetary | None = None
        due: date | None = Field(default=None, alias="Due date")
        paid: bool | None = None
"""

import logging
import re
from collections.abc import Iterable
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, TypeVar

from pydantic import BaseModel

from paperless_api.errors import CustomFieldError
from paperless_api.schemas.custom_fields import (
    CustomField,
    CustomFieldType,
    CustomFieldValue,
    Monetary,
)

logger = logging.getLogger(__name__)

FieldsT = TypeVar("FieldsT", bound=BaseModel)

_MONETARY_PATTERN = re.compile(r"^(?P<currency>[A-Z]{3})?(?P<amount>-?\d+(?:\.\d+)?)$")


class CustomFieldRegistry:
    """Mapping of custom field id to definition, filled lazily.

    One registry is owned by each ``PaperlessClient``; pass the same instance
    to several clients to share it. Entries are only ever added or
    overwritten (last write wins), never removed automatically.

    Usage::

        registry = CustomFieldRegistry()
        registry.populate(fields)
        values = registry.encode(InvoiceFields(paid=True))
        typed = registry.decode(values, InvoiceFields)
    """

    def __init__(self, fields: Iterable[CustomField] = ()) -> None:
        self._fields: dict[int, CustomField] = {}
        self.populate(fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __contains__(self, field_id: object) -> bool:
        return field_id in self._fields

    @property
    def is_populated(self) -> bool:
        return bool(self._fields)

    def add(self, field: CustomField) -> None:
        """Insert or overwrite the definition for ``field.id``."""
        self._fields[field.id] = field

    def populate(self, fields: Iterable[CustomField]) -> None:
        for field in fields:
            self.add(field)

    def clear(self) -> None:
        self._fields.clear()

    def get(self, field_id: int) -> CustomField | None:
        return self._fields.get(field_id)

    def find(self, name: str) -> CustomField | None:
        """Return the field called ``name``, or None."""
        for field in self._fields.values():
            if field.name == name:
                return field
        return None

    def decode(self, values: list[CustomFieldValue], model: type[FieldsT]) -> FieldsT | None:
        """Decode raw document values into ``model``.

        Returns None when the document has no custom field values. Values
        for ids missing from the registry are skipped with a warning.
        """
        if not values:
            return None

        data: dict[str, Any] = {}
        for item in values:
            field = self._fields.get(item.field)
            if field is None:
                logger.warning("Skipping value of unknown custom field %d", item.field)
                continue
            data[field.name] = decode_value(field, item.value)
        return model.model_validate(data)

    def encode(self, fields: BaseModel) -> list[CustomFieldValue]:
        """Encode the explicitly set attributes of ``fields`` into wire values.

        Raises:
            CustomFieldError: An attribute has no matching custom field.
        """
        encoded: list[CustomFieldValue] = []
        for name, info in type(fields).model_fields.items():
            if name not in fields.model_fields_set:
                continue
            field_name = info.alias or name
            field = self.find(field_name)
            if field is None:
                raise CustomFieldError(f"No custom field named {field_name!r}")
            value = encode_value(field, getattr(fields, name))
            encoded.append(CustomFieldValue(field=field.id, value=value))
        return encoded


def decode_value(field: CustomField, value: Any) -> Any:
    """Convert a wire value into the Python type for ``field.data_type``.

    Select values stay as sent (an option index or option id); the target
    model's enum field converts them.
    """
    if value is None:
        return None

    match field.data_type:
        case CustomFieldType.STRING | CustomFieldType.URL:
            return str(value)
        case CustomFieldType.DATE:
            return date.fromisoformat(value)
        case CustomFieldType.BOOLEAN:
            return bool(value)
        case CustomFieldType.INTEGER:
            return int(value)
        case CustomFieldType.FLOAT:
            return float(value)
        case CustomFieldType.MONETARY:
            return _decode_monetary(field, value)
        case CustomFieldType.DOCUMENT_LINK:
            return [int(v) for v in value]
        case CustomFieldType.SELECT:
            return value
    raise CustomFieldError(f"Unsupported data type {field.data_type} for field {field.name!r}")


def encode_value(field: CustomField, value: Any) -> Any:
    """Convert a typed value into the JSON value Paperless expects for ``field``."""
    if value is None:
        return None

    match field.data_type:
        case CustomFieldType.STRING | CustomFieldType.URL:
            return str(value)
        case CustomFieldType.DATE:
            if not isinstance(value, date):
                raise CustomFieldError(f"Field {field.name!r} expects a date, got {value!r}")
            return value.isoformat()
        case CustomFieldType.BOOLEAN:
            return bool(value)
        case CustomFieldType.INTEGER:
            return int(value)
        case CustomFieldType.FLOAT:
            return float(value)
        case CustomFieldType.MONETARY:
            return _encode_monetary(field, value)
        case CustomFieldType.DOCUMENT_LINK:
            return [int(v) for v in value]
        case CustomFieldType.SELECT:
            return value.value if isinstance(value, Enum) else value
    raise CustomFieldError(f"Unsupported data type {field.data_type} for field {field.name!r}")


def _decode_monetary(field: CustomField, value: Any) -> Monetary | None:
    if isinstance(value, bool):
        raise CustomFieldError(f"Invalid monetary value {value!r} for field {field.name!r}")
    if isinstance(value, int | float):
        return Monetary(amount=Decimal(str(value)))
    if value == "":
        return None
    match = _MONETARY_PATTERN.match(str(value))
    if match is None:
        raise CustomFieldError(f"Invalid monetary value {value!r} for field {field.name!r}")
    return Monetary(amount=Decimal(match["amount"]), currency=match["currency"])


def _encode_monetary(field: CustomField, value: Any) -> str:
    if isinstance(value, Monetary):
        amount, currency = value.amount, value.currency
    elif isinstance(value, int | float | Decimal) and not isinstance(value, bool):
        amount, currency = Decimal(str(value)), None
    else:
        raise CustomFieldError(f"Field {field.name!r} expects a monetary amount, got {value!r}")
    return f"{currency or ''}{amount:.2f}"
