"""``marketledger demo`` — run an end-to-end listing and sale.

Mints assets in an in-memory registry, lists them, sells the first one, and
renders the catalog after each step.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel

from marketledger.bridge.payments import InMemoryPaymentRail
from marketledger.bridge.registry import InMemoryAssetRegistry
from marketledger.core.errors import LedgerConfigMismatch
from marketledger.core.ledger import MarketplaceLedger
from marketledger.core.store import LedgerStore
from marketledger.models.events import EventKind
from marketledger.monitor.renderer import CatalogRenderer

console = Console()


def demo_cmd(
    fee: int = typer.Option(1, "--fee", help="Listing fee for the demo ledger."),
    ledger_db: Path = typer.Option(
        None,
        "--ledger",
        help="Persist the demo ledger to this SQLite file (in-memory if omitted).",
    ),
) -> None:
    """Run a complete demo: list two assets, sell one."""
    registry = InMemoryAssetRegistry("demo-registry")
    rail = InMemoryPaymentRail()
    store = LedgerStore(ledger_db) if ledger_db is not None else None
    try:
        ledger = MarketplaceLedger(
            registry, rail, listing_fee=fee, operator="operator", store=store
        )
    except LedgerConfigMismatch as exc:
        console.print(f"[red]Cannot reuse ledger at {ledger_db}:[/red] {exc}")
        raise typer.Exit(code=1)
    renderer = CatalogRenderer(console=console)

    ledger.events.subscribe(
        EventKind.LISTING_CREATED,
        lambda e: console.print(
            f"[green]Listed[/green] #{e.listing_id}: asset {e.asset_id} "
            f"by {e.seller} for {e.price}"
        ),
    )
    ledger.events.subscribe(
        EventKind.LISTING_SOLD,
        lambda e: console.print(
            f"[cyan]Sold[/cyan] #{e.listing_id} to {e.buyer} for {e.price}"
        ),
    )

    console.print()
    console.print(
        Panel(
            "[bold]Marketledger Demo[/bold]\n\n"
            "alice lists two assets; bob buys the first one.",
            border_style="cyan",
            padding=(1, 2),
        )
    )

    rail.deposit("alice", fee * 2)
    rail.deposit("bob", 50)
    ids = []
    for price in (50, 75):
        asset_id = registry.mint("alice")
        registry.authorize_operator(asset_id, ledger.ledger_address, caller="alice")
        ids.append(ledger.create_listing("alice", asset_id, price, fee))

    renderer.print_listings(ledger.list_unsold(), title="Unsold")

    ledger.execute_sale("bob", ids[0], 50)

    renderer.print_listings(ledger.list_unsold(), title="Unsold")
    renderer.print_listings(ledger.list_owned_by("bob"), title="Owned by bob")
    renderer.print_stats(ledger.stats())

    console.print(
        Panel(
            "\n".join([
                "[bold green]Demo Complete![/bold green]",
                "",
                f"[bold]alice balance:[/bold]     {rail.balance_of('alice')}",
                f"[bold]bob balance:[/bold]       {rail.balance_of('bob')}",
                f"[bold]operator balance:[/bold]  {rail.balance_of('operator')}",
                f"[bold]escrow balance:[/bold]    {rail.balance_of(ledger.ledger_address)}",
            ]),
            title="[bold]Demo Summary[/bold]",
            border_style="green",
            padding=(1, 2),
        )
    )
