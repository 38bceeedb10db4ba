"""Pydantic models mirroring Paperless-ngx document API shapes."""

from datetime import datetime
from typing import Annotated, Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from paperless_api.schemas.custom_fields import CustomFieldValue

FieldsT = TypeVar("FieldsT", bound=BaseModel)


class DocumentBase(BaseModel):
    """Fields shared by raw and typed documents."""

    id: int
    title: str
    content: str = ""
    tags: list[int] = Field(default_factory=list)
    correspondent: int | None = None
    document_type: int | None = None
    storage_path: int | None = None
    created: str
    modified: str | None = None
    added: str | None = None
    archive_serial_number: int | None = None
    original_file_name: str | None = None
    archived_file_name: str | None = None
    owner: int | None = None


class Document(DocumentBase):
    """A document with its custom field values in raw wire form."""

    custom_fields: list[CustomFieldValue] = Field(default_factory=list)


class TypedDocument(DocumentBase, Generic[FieldsT]):
    """A document whose custom fields were decoded into ``FieldsT``.

    ``custom_fields`` is None when the document carries no custom field values.
    """

    custom_fields: FieldsT | None = None


class MetadataEntry(BaseModel):
    namespace: str = ""
    prefix: str = ""
    key: str
    value: Any = None


class DocumentMetadata(BaseModel):
    """File level metadata of a document (``/api/documents/{id}/metadata/``)."""

    original_checksum: str
    original_size: int
    original_mime_type: str
    media_filename: str
    has_archive_version: bool = False
    original_metadata: list[MetadataEntry] = Field(default_factory=list)
    original_filename: str | None = None
    archive_checksum: str | None = None
    archive_media_filename: str | None = None
    archive_size: int | None = None
    archive_metadata: list[MetadataEntry] | None = None
    lang: str | None = None


class DocumentContent(BaseModel):
    """A downloaded file: archived, original, preview or thumbnail."""

    content: bytes
    content_type: str
    filename: str | None = None


class DocumentUpdate(BaseModel):
    """Fields to PATCH onto a document. Unset fields are left unchanged."""

    title: str | None = None
    created: datetime | None = None
    correspondent: int | None = None
    document_type: int | None = None
    storage_path: int | None = None
    tags: list[int] | None = None
    archive_serial_number: int | None = None
    custom_fields: list[CustomFieldValue] | None = None


class DocumentCreation(BaseModel):
    """A file to upload plus the metadata to import it with.

    ``document`` is either ``bytes`` or a binary file object opened by the
    caller. Metadata left as None is omitted from the upload so that the
    server's defaults and matching rules apply.
    """

    document: Any
    filename: str
    title: str | None = None
    created: datetime | None = None
    correspondent_id: int | None = None
    document_type_id: int | None = None
    storage_path_id: int | None = None
    tag_ids: list[int] = Field(default_factory=list)
    archive_serial_number: int | None = None


# --- Creation outcome ---


class ImportStarted(BaseModel):
    """The server accepted the upload but is too old to report the import task."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["import_started"] = "import_started"


class DocumentCreated(BaseModel):
    """The import finished and produced document ``id``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["document_created"] = "document_created"
    id: int


class ImportFailed(BaseModel):
    """The import did not produce a document; ``result`` holds the server's reason."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["import_failed"] = "import_failed"
    result: str | None = None


DocumentCreationResult = Annotated[
    ImportStarted | DocumentCreated | ImportFailed,
    Field(discriminator="kind"),
]
