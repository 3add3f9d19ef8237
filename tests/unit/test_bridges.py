"""Unit tests for the in-memory asset registry and payment rail backends."""

from __future__ import annotations

import pytest

from marketledger.bridge.payments import (
    InMemoryPaymentRail,
    InsufficientFunds,
    PaymentRail,
    PaymentRailError,
    ReceiverRejected,
)
from marketledger.bridge.registry import (
    AssetRegistry,
    InMemoryAssetRegistry,
    NotAuthorized,
    Revertible,
    TransferRejected,
    UnknownAsset,
)


class TestInMemoryAssetRegistry:
    def test_satisfies_protocols(self):
        registry = InMemoryAssetRegistry()
        assert isinstance(registry, AssetRegistry)
        assert isinstance(registry, Revertible)

    def test_mint_assigns_sequential_ids(self):
        registry = InMemoryAssetRegistry()
        assert registry.mint("alice") == 1
        assert registry.mint("bob") == 2
        assert registry.owner_of(2) == "bob"

    def test_owner_of_unknown(self):
        with pytest.raises(UnknownAsset):
            InMemoryAssetRegistry().owner_of(1)

    def test_only_holder_can_authorize(self):
        registry = InMemoryAssetRegistry()
        asset_id = registry.mint("alice")
        with pytest.raises(NotAuthorized):
            registry.authorize_operator(asset_id, "market", caller="bob")

    def test_authorized_operator_can_transfer_once(self):
        registry = InMemoryAssetRegistry()
        asset_id = registry.mint("alice")
        registry.authorize_operator(asset_id, "market", caller="alice")
        registry.transfer_custody(asset_id, "alice", "market", operator="market")
        assert registry.owner_of(asset_id) == "market"
        assert registry.approved_operator(asset_id) is None

    def test_unauthorized_operator_rejected(self):
        registry = InMemoryAssetRegistry()
        asset_id = registry.mint("alice")
        with pytest.raises(NotAuthorized):
            registry.transfer_custody(asset_id, "alice", "mallory", operator="mallory")

    def test_wrong_from_party_rejected(self):
        registry = InMemoryAssetRegistry()
        asset_id = registry.mint("alice")
        with pytest.raises(NotAuthorized):
            registry.transfer_custody(asset_id, "bob", "carol", operator="bob")

    def test_receive_hook_runs_and_can_reject(self):
        registry = InMemoryAssetRegistry()
        asset_id = registry.mint("alice")
        calls = []
        registry.on_receive("bob", lambda *args: calls.append(args))
        registry.transfer_custody(asset_id, "alice", "bob", operator="alice")
        assert calls == [(asset_id, "alice", "bob")]

        def _reject(*args):
            raise ValueError("nope")

        registry.on_receive("carol", _reject)
        with pytest.raises(TransferRejected):
            registry.transfer_custody(asset_id, "bob", "carol", operator="bob")

    def test_snapshot_restore(self):
        registry = InMemoryAssetRegistry()
        asset_id = registry.mint("alice")
        token = registry.snapshot()
        registry.transfer_custody(asset_id, "alice", "bob", operator="alice")
        registry.mint("carol")
        registry.restore(token)
        assert registry.owner_of(asset_id) == "alice"
        assert registry.mint("dave") == 2


class TestInMemoryPaymentRail:
    def test_satisfies_protocols(self):
        rail = InMemoryPaymentRail()
        assert isinstance(rail, PaymentRail)
        assert isinstance(rail, Revertible)

    def test_transfer(self):
        rail = InMemoryPaymentRail()
        rail.deposit("bob", 100)
        rail.collect("bob", "market", 60)
        rail.disburse("market", "alice", 60)
        assert rail.balance_of("bob") == 40
        assert rail.balance_of("market") == 0
        assert rail.balance_of("alice") == 60

    def test_insufficient_funds(self):
        rail = InMemoryPaymentRail()
        rail.deposit("bob", 5)
        with pytest.raises(InsufficientFunds):
            rail.disburse("bob", "alice", 6)
        assert rail.balance_of("bob") == 5

    def test_negative_amounts_rejected(self):
        rail = InMemoryPaymentRail()
        with pytest.raises(PaymentRailError):
            rail.deposit("bob", -1)
        with pytest.raises(PaymentRailError):
            rail.disburse("bob", "alice", -1)

    def test_receiver_hook_rejection(self):
        rail = InMemoryPaymentRail()
        rail.deposit("bob", 10)

        def _reject(*args):
            raise ValueError("closed")

        rail.on_receive("alice", _reject)
        with pytest.raises(ReceiverRejected):
            rail.disburse("bob", "alice", 10)
        rail.on_receive("alice", None)
        rail.disburse("bob", "alice", 1)
        assert rail.balance_of("alice") >= 1

    def test_snapshot_restore(self):
        rail = InMemoryPaymentRail()
        rail.deposit("bob", 10)
        token = rail.snapshot()
        rail.disburse("bob", "alice", 10)
        rail.restore(token)
        assert rail.balance_of("bob") == 10
        assert rail.balance_of("alice") == 0
