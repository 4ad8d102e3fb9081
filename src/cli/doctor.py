"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.catalog_sources import build_catalog_source
from core.config import AppSettings, SourceKind, write_user_env_vars
from core.domain.errors import DataSourceError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_source(settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_catalog_source(settings) as source:
            collections = await source.fetch_collections()
        return True, f"{len(collections)} collections"
    except DataSourceError as exc:
        return False, str(exc)


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="collections-view Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    table.add_row("Source", "OK", settings.source.value)
    if settings.source is SourceKind.SQL:
        table.add_row("Database URL", "OK", settings.database_url)
    elif settings.source is SourceKind.HTTP:
        table.add_row("API base_url", "OK", settings.api_base_url)
    elif settings.snapshot_path is None:
        table.add_row("Snapshot", "FAIL", "source=snapshot but no snapshot path configured")
    else:
        table.add_row("Snapshot", "OK", str(settings.snapshot_path))
    table.add_row("Sample size", "OK", str(settings.sample_size))

    # Connectivity (best-effort)
    ok_source, detail_source = asyncio.run(_check_source(settings))
    table.add_row("Catalog connectivity", "OK" if ok_source else "FAIL", detail_source)

    _console.print(table)

    if not ok_source:
        _console.print(
            "\n[yellow]Note:[/yellow] Run `collections-view doctor setup-source` or `collections-view init-db`."
        )
        raise typer.Exit(code=1)


@app.command(name="setup-source")
def setup_source() -> None:
    """Interactive source setup (stores config in the user config .env)."""

    source = typer.prompt(
        "Catalog source (sql/http/snapshot)",
        default=SourceKind.SQL.value,
        show_default=True,
    ).strip().lower()

    try:
        kind = SourceKind(source)
    except ValueError as exc:
        raise typer.BadParameter("source must be one of: sql, http, snapshot") from exc

    values: dict[str, str | None] = {"COLLECTIONS_VIEW_SOURCE": kind.value}
    if kind is SourceKind.SQL:
        values["COLLECTIONS_VIEW_DATABASE_URL"] = typer.prompt(
            "Database URL", default="sqlite+aiosqlite:///./catalog.db", show_default=True
        ).strip()
    elif kind is SourceKind.HTTP:
        values["COLLECTIONS_VIEW_API_BASE_URL"] = typer.prompt(
            "API base URL", default="http://localhost:8000/api", show_default=True
        ).strip()
    else:
        values["COLLECTIONS_VIEW_SNAPSHOT_PATH"] = typer.prompt("Snapshot path").strip()

    if not all(values.values()):
        raise typer.BadParameter("all values are required")

    env_path = write_user_env_vars(values)

    _console.print(f"[green]Saved source config to:[/green] {env_path}")
