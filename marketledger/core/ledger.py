"""Marketplace Ledger — the single entry point for clients.

The ledger wires together the LedgerState, MutationGuard, ListingManager,
SaleExecutor, CatalogQuery, ListingEventBus, and optional LedgerStore into one
component, and exposes the client operations:

- ``create_listing`` / ``execute_sale`` (mutating, guarded, all-or-nothing)
- ``list_unsold`` / ``list_owned_by`` / ``list_created_by`` / ``get_listing``
  (read-only)

Notifications are published on ``events`` after each committed mutation.
"""

from __future__ import annotations

import logging

from marketledger.bridge.payments import PaymentRail
from marketledger.bridge.registry import AssetRegistry
from marketledger.config import ProdConfig
from marketledger.core.catalog import CatalogQuery
from marketledger.core.errors import LedgerConfigMismatch
from marketledger.core.events import ListingEventBus
from marketledger.core.guard import MutationGuard
from marketledger.core.listing_manager import ListingManager, is_amount
from marketledger.core.production_guard import enforce_production_constraints
from marketledger.core.sale_executor import SaleExecutor
from marketledger.core.state import LedgerState
from marketledger.core.store import LedgerStore
from marketledger.models.events import ListingCreated, ListingSold
from marketledger.models.listing import LedgerStats, Listing

logger = logging.getLogger(__name__)


class MarketplaceLedger:
    """Escrowed fixed-price marketplace for uniquely-owned assets.

    Parameters
    ----------
    registry:
        Asset registry the listed assets live in.
    rail:
        Payment rail for fees, payments, and payouts.
    listing_fee:
        Exact fee required by ``create_listing``.  Fixed for the ledger's
        lifetime.
    operator:
        Party that receives each listing's fee when it sells.
    ledger_address:
        Identity under which the ledger holds escrowed assets and funds.
    store:
        Optional durable store.  Existing state is loaded from it; a stored
        fee or operator that differs from the arguments is rejected.
    """

    def __init__(
        self,
        registry: AssetRegistry,
        rail: PaymentRail,
        *,
        listing_fee: int,
        operator: str,
        ledger_address: str = "marketledger",
        store: LedgerStore | None = None,
    ) -> None:
        if not is_amount(listing_fee) or listing_fee < 0:
            raise ValueError(
                f"listing_fee must be a non-negative integer, got {listing_fee!r}."
            )

        self.registry = registry
        self.rail = rail
        self.store = store
        self.state = self._open_state(
            LedgerState(
                listing_fee=listing_fee,
                operator=operator,
                ledger_address=ledger_address,
                registry_ref=registry.registry_ref,
            )
        )

        self.guard = MutationGuard()
        self.events = ListingEventBus()
        self.listings = ListingManager(self.state, self.guard, registry, rail, store)
        self.sales = SaleExecutor(self.state, self.guard, registry, rail, store)
        self.catalog = CatalogQuery(self.state)

    @classmethod
    def from_config(
        cls,
        registry: AssetRegistry,
        rail: PaymentRail,
        config: ProdConfig | None = None,
        *,
        persist: bool = False,
    ) -> MarketplaceLedger:
        """Build a ledger from a ``ProdConfig``.

        The production guard runs first and fails hard on a bad config.
        With ``persist=True`` the ledger is backed by ``config.ledger_path``.
        """
        config = config or ProdConfig()
        enforce_production_constraints(config)
        store = LedgerStore(config.ledger_path) if persist else None
        return cls(
            registry,
            rail,
            listing_fee=config.listing_fee,
            operator=config.operator,
            ledger_address=config.ledger_address,
            store=store,
        )

    def _open_state(self, fresh: LedgerState) -> LedgerState:
        if self.store is None:
            return fresh
        stored = self.store.load()
        if stored is None:
            self.store.save(fresh)
            logger.info("Initialized new ledger at %s.", self.store.db_path)
            return fresh

        mismatches = [
            f"{name}: stored={getattr(stored, name)!r}, configured={getattr(fresh, name)!r}"
            for name in ("listing_fee", "operator", "ledger_address", "registry_ref")
            if getattr(stored, name) != getattr(fresh, name)
        ]
        if mismatches:
            raise LedgerConfigMismatch(
                f"Ledger at {self.store.db_path} was initialized differently: "
                + "; ".join(mismatches)
            )
        return stored

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def ledger_address(self) -> str:
        return self.state.ledger_address

    @property
    def operator(self) -> str:
        return self.state.operator

    def get_listing_fee(self) -> int:
        """Return the exact fee ``create_listing`` requires."""
        return self.state.listing_fee

    @property
    def sold_count(self) -> int:
        return self.state.sold_count

    @property
    def created_count(self) -> int:
        return self.state.created_count

    # ------------------------------------------------------------------
    # Mutating operations
    # ------------------------------------------------------------------

    def create_listing(
        self, caller: str, asset_id: int, price: int, fee_payment: int
    ) -> int:
        """List *asset_id* for *price*, taking it into escrow.

        The caller must hold the asset and have authorized the ledger
        address as its operator.  Returns the new ``listing_id``.
        """
        listing = self.listings.create_listing(caller, asset_id, price, fee_payment)
        self.events.publish(
            ListingCreated(
                listing_id=listing.listing_id,
                registry_ref=listing.registry_ref,
                asset_id=listing.asset_id,
                seller=listing.seller,
                owner=listing.owner,
                price=listing.price,
            )
        )
        return listing.listing_id

    def execute_sale(self, buyer: str, listing_id: int, payment: int) -> Listing:
        """Buy *listing_id* for exactly its price.  Returns the sold listing."""
        sold = self.sales.execute_sale(buyer, listing_id, payment)
        self.events.publish(
            ListingSold(
                listing_id=sold.listing_id,
                asset_id=sold.asset_id,
                seller=sold.seller,
                buyer=buyer,
                price=sold.price,
                fee=sold.fee,
            )
        )
        return sold

    # ------------------------------------------------------------------
    # Queries (read-only)
    # ------------------------------------------------------------------

    def list_unsold(self) -> list[Listing]:
        return self.catalog.list_unsold()

    def list_owned_by(self, party: str) -> list[Listing]:
        return self.catalog.list_owned_by(party)

    def list_created_by(self, seller: str) -> list[Listing]:
        return self.catalog.list_created_by(seller)

    def get_listing(self, listing_id: int) -> Listing:
        return self.catalog.get_listing(listing_id)

    def stats(self) -> LedgerStats:
        return self.catalog.stats()
