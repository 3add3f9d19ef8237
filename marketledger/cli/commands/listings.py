"""``marketledger listings|show|stats`` — read-only queries on a stored ledger."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from marketledger.config import config
from marketledger.core.catalog import CatalogQuery
from marketledger.core.errors import ListingNotFound
from marketledger.core.store import LedgerStore
from marketledger.monitor.renderer import CatalogRenderer

console = Console()

_LEDGER_OPTION = typer.Option(
    None, "--ledger", help="Path to the ledger database (defaults to config)."
)


def _open_catalog(ledger_db: Path | None) -> CatalogQuery:
    path = ledger_db or config.ledger_path
    if not Path(path).exists():
        console.print(f"[red]No ledger found at[/red] {path}")
        raise typer.Exit(code=1)
    state = LedgerStore(path).load()
    if state is None:
        console.print(f"[red]Ledger at {path} has not been initialized.[/red]")
        raise typer.Exit(code=1)
    return CatalogQuery(state)


def listings_cmd(
    unsold: bool = typer.Option(False, "--unsold", help="Only show unsold listings."),
    owner: str = typer.Option(None, "--owner", help="Only show listings owned by this party."),
    seller: str = typer.Option(None, "--seller", help="Only show listings created by this party."),
    ledger_db: Path = _LEDGER_OPTION,
) -> None:
    """List the listings in a stored ledger."""
    catalog = _open_catalog(ledger_db)
    view = catalog.view()
    title = "All listings"
    if unsold:
        view = view.filter(lambda item: item.owner is None)
        title = "Unsold"
    if owner:
        view = view.filter(lambda item: item.owner == owner)
        title = f"Owned by {owner}"
    if seller:
        view = view.filter(lambda item: item.seller == seller)
        title = f"Listed by {seller}"
    CatalogRenderer(console=console).print_listings(view, title=title)


def show_cmd(
    listing_id: int = typer.Argument(..., help="Listing id to show."),
    ledger_db: Path = _LEDGER_OPTION,
) -> None:
    """Show a single listing."""
    catalog = _open_catalog(ledger_db)
    try:
        listing = catalog.get_listing(listing_id)
    except ListingNotFound as exc:
        console.print(f"[yellow]{exc}[/yellow]")
        raise typer.Exit(code=1)
    CatalogRenderer(console=console).print_listing(listing)


def stats_cmd(ledger_db: Path = _LEDGER_OPTION) -> None:
    """Show ledger counters."""
    catalog = _open_catalog(ledger_db)
    CatalogRenderer(console=console).print_stats(catalog.stats())
