"""Tests for the Rich catalog renderer."""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from marketledger.models.listing import LedgerStats, Listing
from marketledger.monitor.renderer import CatalogRenderer


def _listing(listing_id: int = 1, owner: str | None = None) -> Listing:
    listing = Listing(
        listing_id=listing_id,
        registry_ref="registry-test",
        asset_id=7,
        seller="alice",
        price=100,
        fee=1,
    )
    return listing.mark_sold(owner) if owner else listing


def _renderer() -> CatalogRenderer:
    return CatalogRenderer(Console(record=True, width=120))


class TestCatalogRenderer:
    def test_render_listings_returns_table(self):
        table = _renderer().render_listings([_listing(1), _listing(2, owner="bob")])
        assert isinstance(table, Table)
        assert table.row_count == 2

    def test_print_listings_shows_parties(self):
        renderer = _renderer()
        renderer.print_listings([_listing(1, owner="bob")], title="Sold")
        text = renderer.console.export_text()
        assert "alice" in text
        assert "bob" in text
        assert "SOLD" in text

    def test_print_empty_listings(self):
        renderer = _renderer()
        renderer.print_listings([], title="Unsold")
        assert "No listings (unsold)" in renderer.console.export_text()

    def test_render_listing_panel(self):
        panel = _renderer().render_listing(_listing(3))
        assert isinstance(panel, Panel)

        renderer = _renderer()
        renderer.print_listing(_listing(3, owner="bob"))
        text = renderer.console.export_text()
        assert "Sold:" in text
        assert "bob" in text

    def test_print_stats(self):
        renderer = _renderer()
        renderer.print_stats(
            LedgerStats(created=3, sold=1, unsold=2, listing_fee=1, escrowed_fees=2)
        )
        text = renderer.console.export_text()
        assert "Ledger Stats" in text
        assert "Escrowed fees" in text
