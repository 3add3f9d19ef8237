"""Ledger state — the listing mapping, counters, and fee/operator config.

``LedgerState`` is owned by a ``MarketplaceLedger`` and passed by
reference into the listing manager, sale executor, and catalog query.
There is no process-wide instance.

Invariants maintained by the mutating components:
- ``next_listing_id - 1`` listings exist, with ids ``1..next_listing_id-1``
- ``sold_count`` equals the number of listings with an owner
- ``listing_fee`` and ``operator`` never change after initialization
"""

from __future__ import annotations

from dataclasses import dataclass

from marketledger.models.listing import Listing


@dataclass(frozen=True)
class StateSnapshot:
    """Point-in-time copy of the mutable parts of ``LedgerState``."""

    listings: dict[int, Listing]
    next_listing_id: int
    sold_count: int


class LedgerState:
    """Mutable marketplace ledger state.

    Parameters
    ----------
    listing_fee:
        Exact fee attached to every ``create_listing`` call.
    operator:
        Party entitled to the listing fee once the listing sells.
    ledger_address:
        Identity under which the ledger holds escrowed assets and funds.
    registry_ref:
        Asset registry the listed assets belong to.
    """

    def __init__(
        self,
        listing_fee: int,
        operator: str,
        ledger_address: str = "marketledger",
        registry_ref: str = "registry-0",
    ) -> None:
        self.listing_fee = listing_fee
        self.operator = operator
        self.ledger_address = ledger_address
        self.registry_ref = registry_ref
        self.listings: dict[int, Listing] = {}
        self.next_listing_id = 1
        self.sold_count = 0

    @property
    def created_count(self) -> int:
        return self.next_listing_id - 1

    def allocate_listing_id(self) -> int:
        """Reserve and return the next listing id."""
        listing_id = self.next_listing_id
        self.next_listing_id += 1
        return listing_id

    def get(self, listing_id: int) -> Listing | None:
        """Return the stored listing, or ``None`` for a lookup miss."""
        return self.listings.get(listing_id)

    def put(self, listing: Listing) -> None:
        self.listings[listing.listing_id] = listing

    def ordered_listings(self) -> tuple[Listing, ...]:
        """Return every listing in ascending ``listing_id`` order."""
        return tuple(self.listings[k] for k in sorted(self.listings))

    # ------------------------------------------------------------------
    # Rollback support
    # ------------------------------------------------------------------

    def snapshot(self) -> StateSnapshot:
        # Listings are frozen models, so a shallow dict copy is sufficient.
        return StateSnapshot(
            listings=dict(self.listings),
            next_listing_id=self.next_listing_id,
            sold_count=self.sold_count,
        )

    def restore(self, token: StateSnapshot) -> None:
        self.listings = dict(token.listings)
        self.next_listing_id = token.next_listing_id
        self.sold_count = token.sold_count
