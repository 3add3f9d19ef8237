"""Listing record — one asset offered for sale at a fixed price.

A listing is created unsold (``owner is None``) and transitions to sold
exactly once, when ``owner`` is set to the buyer.  Listings are never
deleted; the catalog is an append-only record even after sale.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


class Listing(BaseModel):
    """Immutable snapshot of a marketplace listing.

    ``owner`` uses ``None`` as the explicit "no owner yet" variant, so an
    unsold listing can never collide with a real party identity.

    Examples
    --------
    >>> listing = Listing(
    ...     listing_id=1,
    ...     registry_ref="registry-0",
    ...     asset_id=7,
    ...     seller="alice",
    ...     price=100,
    ...     fee=1,
    ... )
    >>> listing.is_sold
    False
    >>> listing.mark_sold("bob").owner
    'bob'
    """

    model_config = ConfigDict(frozen=True)

    listing_id: int
    registry_ref: str
    asset_id: int
    seller: str
    owner: str | None = None
    price: int = Field(gt=0)
    fee: int = Field(default=0, ge=0)  # listing fee retained at creation
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    sold_at: datetime | None = None

    @property
    def is_sold(self) -> bool:
        """Whether a sale has completed for this listing."""
        return self.owner is not None

    def mark_sold(self, buyer: str) -> Listing:
        """Return a copy of this listing owned by *buyer*."""
        return self.model_copy(
            update={"owner": buyer, "sold_at": datetime.now(timezone.utc)}
        )


class LedgerStats(BaseModel):
    """Summary counters for a marketplace ledger."""

    model_config = ConfigDict(frozen=True)

    created: int = 0
    sold: int = 0
    unsold: int = 0
    listing_fee: int = 0
    escrowed_fees: int = 0  # fees collected from listings still unsold
