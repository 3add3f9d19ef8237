"""Marketledger data models — Pydantic v2, frozen (immutable)."""

from marketledger.models.events import (
    EventKind,
    LedgerEvent,
    ListingCreated,
    ListingSold,
)
from marketledger.models.listing import LedgerStats, Listing

__all__ = [
    # listing
    "Listing",
    "LedgerStats",
    # events
    "EventKind",
    "LedgerEvent",
    "ListingCreated",
    "ListingSold",
]
