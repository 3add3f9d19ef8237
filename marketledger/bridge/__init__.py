"""Bridges to the ledger's external collaborators.

- ``registry``: the asset registry holding custody of each unique asset.
- ``payments``: the payment rail for the platform's native unit.

Each exposes a Protocol plus an in-memory reference backend.
"""

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
    RegistryError,
    Revertible,
    TransferRejected,
    UnknownAsset,
)

__all__ = [
    "AssetRegistry",
    "InMemoryAssetRegistry",
    "RegistryError",
    "NotAuthorized",
    "UnknownAsset",
    "TransferRejected",
    "Revertible",
    "PaymentRail",
    "InMemoryPaymentRail",
    "PaymentRailError",
    "InsufficientFunds",
    "ReceiverRejected",
]
