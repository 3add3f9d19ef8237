"""Tests for production config and the production guard."""

from __future__ import annotations

from pathlib import Path

import pytest

from marketledger.bridge.payments import InMemoryPaymentRail
from marketledger.bridge.registry import InMemoryAssetRegistry
from marketledger.config import ProdConfig
from marketledger.core.ledger import MarketplaceLedger
from marketledger.core.production_guard import (
    ProductionConfigError,
    enforce_production_constraints,
)


class TestProdConfig:
    def test_defaults(self):
        config = ProdConfig()
        assert config.environment == "development"
        assert config.log_level == "INFO"
        assert config.listing_fee == 1
        assert config.operator == "operator"
        assert config.ledger_path == Path(".marketledger/ledger.db")

    def test_is_production(self):
        assert ProdConfig().is_production is False
        assert ProdConfig(environment="production").is_production is True

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("MARKETLEDGER_LISTING_FEE", "25")
        monkeypatch.setenv("MARKETLEDGER_OPERATOR", "treasury")
        config = ProdConfig()
        assert config.listing_fee == 25
        assert config.operator == "treasury"


class TestProductionGuard:
    def test_debug_in_production_rejected(self):
        with pytest.raises(ProductionConfigError, match="debug=True"):
            enforce_production_constraints(ProdConfig(environment="production", debug=True))

    def test_empty_operator_in_production_rejected(self):
        with pytest.raises(ProductionConfigError, match="operator"):
            enforce_production_constraints(ProdConfig(environment="production", operator=""))

    def test_negative_fee_in_production_rejected(self):
        with pytest.raises(ProductionConfigError, match="listing_fee"):
            enforce_production_constraints(
                ProdConfig(environment="production", listing_fee=-1)
            )

    def test_valid_production_passes(self):
        enforce_production_constraints(ProdConfig(environment="production"))

    def test_development_is_permissive(self):
        enforce_production_constraints(ProdConfig(debug=True, operator=""))


class TestFromConfig:
    def test_builds_ledger_from_config(self):
        config = ProdConfig(listing_fee=7, operator="treasury", ledger_address="escrow")
        ledger = MarketplaceLedger.from_config(
            InMemoryAssetRegistry(), InMemoryPaymentRail(), config
        )
        assert ledger.get_listing_fee() == 7
        assert ledger.operator == "treasury"
        assert ledger.ledger_address == "escrow"
        assert ledger.store is None

    def test_persistent_ledger_from_config(self, tmp_path: Path):
        config = ProdConfig(ledger_path=tmp_path / "ledger.db")
        ledger = MarketplaceLedger.from_config(
            InMemoryAssetRegistry(), InMemoryPaymentRail(), config, persist=True
        )
        assert ledger.store is not None
        assert (tmp_path / "ledger.db").exists()

    def test_production_guard_runs_first(self):
        config = ProdConfig(environment="production", debug=True)
        with pytest.raises(ProductionConfigError):
            MarketplaceLedger.from_config(
                InMemoryAssetRegistry(), InMemoryPaymentRail(), config
            )
