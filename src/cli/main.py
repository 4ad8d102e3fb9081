"""Command-line interface (Typer).

The CLI is a thin presentation layer: it builds settings, picks a catalog
source and delegates all aggregation to `core.services.collections_pipeline`.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from sqlalchemy.exc import SQLAlchemyError

from adapters.catalog_sources import build_catalog_source, load_snapshot
from adapters.database import build_async_engine, create_schema, seed_catalog
from adapters.json_exporter import export_page_json
from cli.doctor import app as doctor_app
from cli.ui_components import print_banner, print_page
from core.config import AppSettings, SourceKind
from core.domain.errors import DataSourceError
from core.domain.models import CollectionsPage, PageStatus
from core.services.collections_pipeline import PipelineHooks, load_collections_page

app = typer.Typer(no_args_is_help=True, help="Catalog collections view.")
app.add_typer(doctor_app, name="doctor")

_console = Console()


def _settings_with_overrides(
    *,
    source: SourceKind | None = None,
    snapshot: Path | None = None,
    sample_size: int | None = None,
    database_url: str | None = None,
) -> AppSettings:
    settings = AppSettings()
    update: dict[str, object] = {}
    if snapshot is not None:
        update["snapshot_path"] = snapshot
        # A snapshot path without an explicit source means "read the snapshot".
        if source is None:
            update["source"] = SourceKind.SNAPSHOT
    if source is not None:
        update["source"] = source
    if sample_size is not None:
        update["sample_size"] = sample_size
    if database_url is not None:
        update["database_url"] = database_url
    return settings.model_copy(update=update) if update else settings


async def render_page(*, settings: AppSettings, hooks: PipelineHooks | None = None) -> CollectionsPage:
    """Open the configured source, run the pipeline and close the source."""

    try:
        source = build_catalog_source(settings)
    except DataSourceError as exc:
        return CollectionsPage(status=PageStatus.FAILED, error=str(exc))

    async with source:
        return await load_collections_page(
            source=source,
            sample_size=settings.sample_size,
            hooks=hooks,
        )


@app.command()
def show(
    source: Optional[SourceKind] = typer.Option(None, "--source", help="Catalog backend (sql, http, snapshot)."),
    snapshot: Optional[Path] = typer.Option(None, "--snapshot", help="JSON catalog snapshot to read."),
    sample_size: Optional[int] = typer.Option(None, "--sample-size", min=1, help="Products shown per collection."),
    json_path: Optional[Path] = typer.Option(None, "--json", help="Also export the view as JSON."),
    no_banner: bool = typer.Option(False, "--no-banner", help="Skip the page heading."),
) -> None:
    """Render the collections view."""

    settings = _settings_with_overrides(source=source, snapshot=snapshot, sample_size=sample_size)

    def warn(message: str) -> None:
        _console.print(f"[yellow]Warning:[/yellow] {escape(message)}")

    page = asyncio.run(render_page(settings=settings, hooks=PipelineHooks(warning=warn)))

    if not no_banner:
        print_banner(_console)
    print_page(_console, page)

    if json_path is not None:
        out = export_page_json(page=page, output_path=json_path)
        _console.print(f"[green]Saved JSON to:[/green] {out}")

    if page.status is PageStatus.FAILED:
        raise typer.Exit(code=1)


async def _init_db(settings: AppSettings, snapshot: Path | None) -> int:
    engine = build_async_engine(settings)
    try:
        await create_schema(engine)
        if snapshot is None:
            return 0
        data = load_snapshot(snapshot)
        await seed_catalog(
            engine,
            collection_rows=data.collections,
            product_rows=data.products,
            memberships=[(m.collection_id, m.product_id) for m in data.memberships],
            image_rows=data.images,
        )
        return len(data.collections)
    finally:
        await engine.dispose()


@app.command(name="init-db")
def init_db(
    snapshot: Optional[Path] = typer.Option(None, "--snapshot", help="Seed the tables from a JSON snapshot."),
    database_url: Optional[str] = typer.Option(None, "--database-url", help="Override the configured database URL."),
) -> None:
    """Create the catalog tables (and optionally seed them)."""

    settings = _settings_with_overrides(database_url=database_url)
    try:
        seeded = asyncio.run(_init_db(settings, snapshot))
    except (SQLAlchemyError, DataSourceError) as exc:
        _console.print(f"[red]Database setup failed:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    _console.print(f"[green]Schema ready[/green] ({seeded} collections seeded)")


def run() -> None:
    app()
