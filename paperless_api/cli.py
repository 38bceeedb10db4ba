"""Command line access to a Paperless-ngx instance.

Commands:
    paperless-api documents      list documents (optionally filtered)
    paperless-api tags           list tags
    paperless-api correspondents list correspondents
    paperless-api custom-fields  list custom field definitions
    paperless-api upload FILE    upload a document and wait for the import
    paperless-api task ID        show an import task
"""

import asyncio
import logging
import sys
from pathlib import Path
from uuid import UUID

import click

from paperless_api.client import PaperlessClient
from paperless_api.config import PaperlessSettings, get_settings
from paperless_api.errors import ConfigurationError
from paperless_api.schemas.documents import (
    DocumentCreated,
    DocumentCreation,
    DocumentCreationResult,
    ImportFailed,
    ImportStarted,
)
from paperless_api.schemas.filters import DocumentFilter
from paperless_api.schemas.tasks import PaperlessTask

logger = logging.getLogger("paperless_api")


def _load_settings() -> PaperlessSettings:
    """Load the settings, failing loudly if they are invalid or incomplete."""
    try:
        settings = get_settings()
    except ConfigurationError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    if settings.missing:
        click.echo(f"Error: Missing required config: {', '.join(settings.missing)}", err=True)
        click.echo("Set these in secrets/paperless.env or the environment.", err=True)
        sys.exit(1)
    return settings


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """Typed client for the Paperless-ngx REST API."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


# ------------------------------------------------------------------
# Listings
# ------------------------------------------------------------------


@cli.command()
@click.option("--query", "-q", default=None, help="Full text query.")
@click.option("--limit", "-n", default=0, show_default=True, help="Max documents to show (0=all).")
@click.option("--page-size", default=None, type=int, help="Documents fetched per request.")
def documents(query: str | None, limit: int, page_size: int | None) -> None:
    """List documents."""
    settings = _load_settings()
    asyncio.run(_documents_async(settings, query, limit, page_size))


async def _documents_async(
    settings: PaperlessSettings,
    query: str | None,
    limit: int,
    page_size: int | None,
) -> None:
    document_filter = DocumentFilter(query=query) if query else None
    shown = 0
    async with PaperlessClient.from_config(settings) as client:
        async for document in client.documents.get_all(document_filter=document_filter, page_size=page_size):
            click.echo(f"{document.id:>6}  {document.created[:10]}  {document.title}")
            shown += 1
            if limit > 0 and shown >= limit:
                break
    if shown == 0:
        click.echo("No documents found.")


@cli.command()
def tags() -> None:
    """List tags."""
    settings = _load_settings()
    asyncio.run(_tags_async(settings))


async def _tags_async(settings: PaperlessSettings) -> None:
    async with PaperlessClient.from_config(settings) as client:
        async for tag in client.tags.get_all():
            click.echo(f"{tag.id:>6}  {tag.name} ({tag.document_count})")


@cli.command()
def correspondents() -> None:
    """List correspondents."""
    settings = _load_settings()
    asyncio.run(_correspondents_async(settings))


async def _correspondents_async(settings: PaperlessSettings) -> None:
    async with PaperlessClient.from_config(settings) as client:
        async for correspondent in client.correspondents.get_all():
            click.echo(f"{correspondent.id:>6}  {correspondent.name} ({correspondent.document_count})")


@cli.command("custom-fields")
def custom_fields() -> None:
    """List custom field definitions."""
    settings = _load_settings()
    asyncio.run(_custom_fields_async(settings))


async def _custom_fields_async(settings: PaperlessSettings) -> None:
    async with PaperlessClient.from_config(settings) as client:
        async for field in client.documents.get_custom_fields():
            click.echo(f"{field.id:>6}  {field.name} [{field.data_type.value}]")


# ------------------------------------------------------------------
# Upload and tasks
# ------------------------------------------------------------------


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--title", default=None, help="Title override (defaults to the server's choice).")
@click.option("--correspondent", "correspondent_id", default=None, type=int, help="Correspondent id.")
@click.option("--document-type", "document_type_id", default=None, type=int, help="Document type id.")
@click.option("--tag", "tag_ids", multiple=True, type=int, help="Tag id (repeatable).")
@click.option("--asn", "archive_serial_number", default=None, type=int, help="Archive serial number.")
def upload(
    file: Path,
    title: str | None,
    correspondent_id: int | None,
    document_type_id: int | None,
    tag_ids: tuple[int, ...],
    archive_serial_number: int | None,
) -> None:
    """Upload FILE and wait until Paperless has imported it."""
    settings = _load_settings()
    with file.open("rb") as f:
        creation = DocumentCreation(
            document=f,
            filename=file.name,
            title=title,
            correspondent_id=correspondent_id,
            document_type_id=document_type_id,
            tag_ids=list(tag_ids),
            archive_serial_number=archive_serial_number,
        )
        result = asyncio.run(_upload_async(settings, creation))
    match result:
        case DocumentCreated(id=document_id):
            click.echo(f"Created document {document_id}")
        case ImportStarted():
            click.echo("Upload accepted; this server does not report the import result.")
        case ImportFailed(result=reason):
            click.echo(f"Import failed: {reason}", err=True)
            sys.exit(1)


async def _upload_async(settings: PaperlessSettings, creation: DocumentCreation) -> DocumentCreationResult:
    async with PaperlessClient.from_config(settings) as client:
        return await client.documents.create(creation)


@cli.command()
@click.argument("task_id", type=click.UUID)
def task(task_id: UUID) -> None:
    """Show the state of an import task."""
    settings = _load_settings()
    found = asyncio.run(_task_async(settings, task_id))
    if found is None:
        click.echo(f"Task {task_id} not found.", err=True)
        sys.exit(1)
    click.echo(f"status={found.status.value} document={found.related_document} file={found.task_file_name}")
    if found.result:
        click.echo(f"  {found.result}")


async def _task_async(settings: PaperlessSettings, task_id: UUID) -> PaperlessTask | None:
    async with PaperlessClient.from_config(settings) as client:
        return await client.tasks.get(task_id)
