"""CLI UI components (Rich).

Why separate components:
- Keeps command logic apart from visual details.
- Lets several commands reuse the same panels and messages.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console, Group
from rich.columns import Columns
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import CollectionsPage, CollectionView, PageStatus

EMPTY_MESSAGE = "No collections available yet."
ERROR_MESSAGE = "Error loading collections. Please try again later."
TAGLINE = "Discover our curated collections featuring the latest trends and timeless classics"


def print_banner(console: Console) -> None:
    """Print the page heading.

    Kept here so non-interactive modes (JSON export) can skip it.
    """

    title = Text("Collections", style="bold cyan")
    subtitle = Text(TAGLINE, style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_collection_panel(collection: CollectionView) -> Panel:
    """One card per collection: blurb, featured products, link."""

    parts: list[object] = [Text(collection.blurb, style="white")]

    if collection.products:
        table = Table(title="Featured products", title_style="dim", show_edge=False)
        table.add_column("Product", style="cyan", no_wrap=True)
        table.add_column("Image", style="magenta")
        for product in collection.products:
            image = product.image_url or Text("No image", style="dim")
            table.add_row(product.name, image)
        parts.append(table)

    parts.append(Text(f"View Collection → {collection.link}", style="bold green"))
    return Panel(
        Group(*parts),
        title=Text(collection.name, style="bold"),
        border_style="bright_black",
    )


def print_page(console: Console, page: CollectionsPage) -> None:
    """Render a page according to its status."""

    if page.status is PageStatus.FAILED:
        console.print(f"[red]{ERROR_MESSAGE}[/red]")
        if page.error:
            console.print(Text(page.error, style="dim"))
        return

    if page.status is PageStatus.EMPTY:
        console.print(f"[dim]{EMPTY_MESSAGE}[/dim]")
        return

    console.print(Columns([build_collection_panel(c) for c in page.collections], equal=True))
