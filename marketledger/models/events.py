"""Ledger notifications delivered synchronously after a committed mutation."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class EventKind(str, Enum):
    """Notification types emitted by the marketplace ledger."""

    LISTING_CREATED = "listing_created"
    LISTING_SOLD = "listing_sold"


class LedgerEvent(BaseModel):
    """Base fields shared by every ledger notification."""

    model_config = ConfigDict(frozen=True)

    event_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    timestamp_utc: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    event_kind: EventKind
    listing_id: int


class ListingCreated(LedgerEvent):
    """Carries the newly assigned id so clients need no follow-up query."""

    event_kind: EventKind = EventKind.LISTING_CREATED
    registry_ref: str
    asset_id: int
    seller: str
    owner: str | None = None
    price: int


class ListingSold(LedgerEvent):
    """Reports a completed payment-for-custody swap."""

    event_kind: EventKind = EventKind.LISTING_SOLD
    asset_id: int
    seller: str
    buyer: str
    price: int
    fee: int
