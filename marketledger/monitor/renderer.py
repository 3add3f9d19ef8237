"""Rich terminal renderer for marketplace listings and ledger stats.

Color scheme
------------
- green   : unsold listing (available)
- dim     : sold listing
- cyan    : listing ids and parties
"""

from __future__ import annotations

from collections.abc import Iterable

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from marketledger.models.listing import LedgerStats, Listing

_STATUS_MARKUP = {
    False: "[green]FOR SALE[/green]",
    True: "[dim]SOLD[/dim]",
}


class CatalogRenderer:
    """Renders listings and stats as Rich terminal output.

    Parameters
    ----------
    console:
        Rich Console instance.  A new one is created if not provided.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def render_listings(self, listings: Iterable[Listing], title: str = "Listings") -> Table:
        table = Table(title=title)
        table.add_column("ID", style="cyan", justify="right")
        table.add_column("Asset", justify="right")
        table.add_column("Registry")
        table.add_column("Seller", style="cyan")
        table.add_column("Owner", style="cyan")
        table.add_column("Price", justify="right", style="bold")
        table.add_column("Fee", justify="right")
        table.add_column("Status", justify="center")

        for item in listings:
            table.add_row(
                str(item.listing_id),
                str(item.asset_id),
                item.registry_ref,
                item.seller,
                item.owner or "[dim]-[/dim]",
                str(item.price),
                str(item.fee),
                _STATUS_MARKUP[item.is_sold],
            )
        return table

    def render_listing(self, listing: Listing) -> Panel:
        lines = [
            f"[bold]Listing:[/bold]   {listing.listing_id}",
            f"[bold]Asset:[/bold]     {listing.asset_id} ({listing.registry_ref})",
            f"[bold]Seller:[/bold]    {listing.seller}",
            f"[bold]Owner:[/bold]     {listing.owner or '-'}",
            f"[bold]Price:[/bold]     {listing.price}",
            f"[bold]Fee:[/bold]       {listing.fee}",
            f"[bold]Created:[/bold]   {listing.created_at.isoformat()}",
        ]
        if listing.sold_at is not None:
            lines.append(f"[bold]Sold:[/bold]      {listing.sold_at.isoformat()}")
        return Panel(
            "\n".join(lines),
            title=f"[bold]{_STATUS_MARKUP[listing.is_sold]}[/bold]",
            border_style="dim" if listing.is_sold else "green",
            padding=(1, 2),
        )

    def render_stats(self, stats: LedgerStats) -> Panel:
        return Panel(
            "\n".join([
                f"[bold]Created:[/bold]        {stats.created}",
                f"[bold]Sold:[/bold]           {stats.sold}",
                f"[bold]Unsold:[/bold]         {stats.unsold}",
                f"[bold]Listing fee:[/bold]    {stats.listing_fee}",
                f"[bold]Escrowed fees:[/bold]  {stats.escrowed_fees}",
            ]),
            title="[bold]Ledger Stats[/bold]",
            border_style="cyan",
            padding=(1, 2),
        )

    # ------------------------------------------------------------------
    # Print helpers
    # ------------------------------------------------------------------

    def print_listings(self, listings: Iterable[Listing], title: str = "Listings") -> None:
        listings = list(listings)
        if not listings:
            self.console.print(f"[dim]No listings ({title.lower()}).[/dim]")
            return
        self.console.print(self.render_listings(listings, title=title))

    def print_listing(self, listing: Listing) -> None:
        self.console.print(self.render_listing(listing))

    def print_stats(self, stats: LedgerStats) -> None:
        self.console.print(self.render_stats(stats))
