"""Shared test fixtures for Marketledger."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from marketledger.bridge.payments import InMemoryPaymentRail
from marketledger.bridge.registry import InMemoryAssetRegistry
from marketledger.core.ledger import MarketplaceLedger
from marketledger.core.store import LedgerStore

LISTING_FEE = 1
OPERATOR = "operator"


@pytest.fixture
def registry() -> InMemoryAssetRegistry:
    """Provide an empty in-memory asset registry."""
    return InMemoryAssetRegistry("registry-test")


@pytest.fixture
def rail() -> InMemoryPaymentRail:
    """Provide an in-memory payment rail with alice and bob funded."""
    rail = InMemoryPaymentRail()
    rail.deposit("alice", 1_000)
    rail.deposit("bob", 1_000)
    return rail


@pytest.fixture
def ledger(registry: InMemoryAssetRegistry, rail: InMemoryPaymentRail) -> MarketplaceLedger:
    """Provide an in-memory ledger with a listing fee of 1."""
    return MarketplaceLedger(
        registry, rail, listing_fee=LISTING_FEE, operator=OPERATOR
    )


@pytest.fixture
def store(tmp_path: Path) -> LedgerStore:
    """Provide a fresh LedgerStore backed by a temp SQLite database."""
    return LedgerStore(tmp_path / "ledger.db")


@pytest.fixture
def approved_asset(
    registry: InMemoryAssetRegistry, ledger: MarketplaceLedger
) -> Callable[..., int]:
    """Factory fixture: mint an asset and authorize the ledger to take it."""

    def _factory(owner: str = "alice") -> int:
        asset_id = registry.mint(owner)
        registry.authorize_operator(asset_id, ledger.ledger_address, caller=owner)
        return asset_id

    return _factory


@pytest.fixture
def make_listing(
    ledger: MarketplaceLedger, approved_asset: Callable[..., int]
) -> Callable[..., int]:
    """Factory fixture: list a freshly minted asset and return the listing id."""

    def _factory(price: int = 100, seller: str = "alice") -> int:
        asset_id = approved_asset(seller)
        return ledger.create_listing(seller, asset_id, price, LISTING_FEE)

    return _factory
