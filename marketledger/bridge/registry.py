"""Asset registry backends — who holds custody of each unique asset.

Defines the ``AssetRegistry`` Protocol the ledger consumes, and
``InMemoryAssetRegistry``, a reference backend suitable for development,
tests, and the CLI demo.

Receive hooks model untrusted receiver code: a hook registered for a party
runs synchronously whenever that party is handed custody, and may call back
into the ledger before the transfer returns.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

ReceiveHook = Callable[[int, str, str], None]  # (asset_id, from_party, to_party)


class RegistryError(RuntimeError):
    """Raised when the registry refuses a mint, approval, or transfer."""


class UnknownAsset(RegistryError):
    """Raised for an ``asset_id`` that was never minted."""


class NotAuthorized(RegistryError):
    """Raised when the acting party has no authority over the asset."""


class TransferRejected(RegistryError):
    """Raised when the receiving party's hook fails."""


# ---------------------------------------------------------------------------
# Protocols
# ---------------------------------------------------------------------------


@runtime_checkable
class AssetRegistry(Protocol):
    """Protocol for asset registry backends.

    Any object providing these methods can back a marketplace ledger.
    """

    registry_ref: str

    def mint(self, owner: str) -> int:
        """Create a new asset held by *owner* and return its id."""
        ...

    def owner_of(self, asset_id: int) -> str:
        """Return the current custodian of *asset_id*."""
        ...

    def authorize_operator(self, asset_id: int, operator: str, *, caller: str) -> None:
        """Let *operator* move *asset_id* on behalf of its custodian."""
        ...

    def transfer_custody(
        self, asset_id: int, from_party: str, to_party: str, *, operator: str
    ) -> None:
        """Move *asset_id* from *from_party* to *to_party*, acting as *operator*."""
        ...


@runtime_checkable
class Revertible(Protocol):
    """Protocol for collaborators that take part in ledger rollback."""

    def snapshot(self) -> Any:
        ...

    def restore(self, token: Any) -> None:
        ...


# ---------------------------------------------------------------------------
# Reference implementation
# ---------------------------------------------------------------------------


class InMemoryAssetRegistry:
    """Dict-backed registry of unique assets.

    Asset ids start at 1.  A transfer is allowed when the acting operator
    is the current custodian or the operator authorized for that asset;
    the authorization is cleared by every transfer.

    Parameters
    ----------
    registry_ref:
        Identifier of this registry, recorded on every listing.
    """

    def __init__(self, registry_ref: str = "registry-0") -> None:
        self.registry_ref = registry_ref
        self._owners: dict[int, str] = {}
        self._approvals: dict[int, str] = {}
        self._next_asset_id = 1
        self._hooks: dict[str, ReceiveHook] = {}

    # -- Registry operations ------------------------------------------------

    def mint(self, owner: str) -> int:
        asset_id = self._next_asset_id
        self._next_asset_id += 1
        self._owners[asset_id] = owner
        logger.debug("Minted asset %d for '%s'.", asset_id, owner)
        return asset_id

    def owner_of(self, asset_id: int) -> str:
        try:
            return self._owners[asset_id]
        except KeyError:
            raise UnknownAsset(f"Asset {asset_id} does not exist.") from None

    def approved_operator(self, asset_id: int) -> str | None:
        """Return the operator authorized for *asset_id*, if any."""
        return self._approvals.get(asset_id)

    def authorize_operator(self, asset_id: int, operator: str, *, caller: str) -> None:
        if self.owner_of(asset_id) != caller:
            raise NotAuthorized(
                f"'{caller}' does not hold asset {asset_id} and cannot authorize operators."
            )
        self._approvals[asset_id] = operator
        logger.debug("Asset %d: '%s' authorized '%s'.", asset_id, caller, operator)

    def transfer_custody(
        self, asset_id: int, from_party: str, to_party: str, *, operator: str
    ) -> None:
        holder = self.owner_of(asset_id)
        if holder != from_party:
            raise NotAuthorized(
                f"Asset {asset_id} is held by '{holder}', not '{from_party}'."
            )
        if operator != holder and self._approvals.get(asset_id) != operator:
            raise NotAuthorized(
                f"'{operator}' is not authorized to move asset {asset_id}."
            )

        self._owners[asset_id] = to_party
        self._approvals.pop(asset_id, None)
        logger.debug(
            "Asset %d custody: '%s' -> '%s' (by '%s').",
            asset_id, from_party, to_party, operator,
        )

        hook = self._hooks.get(to_party)
        if hook is not None:
            try:
                hook(asset_id, from_party, to_party)
            except Exception as exc:
                raise TransferRejected(
                    f"Receiver '{to_party}' rejected asset {asset_id}: {exc}"
                ) from exc

    # -- Receiver code ------------------------------------------------------

    def on_receive(self, party: str, hook: ReceiveHook | None) -> None:
        """Register (or clear, with ``None``) the receive hook for *party*."""
        if hook is None:
            self._hooks.pop(party, None)
        else:
            self._hooks[party] = hook

    # -- Revertible ---------------------------------------------------------

    def snapshot(self) -> tuple[dict[int, str], dict[int, str], int]:
        return dict(self._owners), dict(self._approvals), self._next_asset_id

    def restore(self, token: tuple[dict[int, str], dict[int, str], int]) -> None:
        owners, approvals, next_asset_id = token
        self._owners = dict(owners)
        self._approvals = dict(approvals)
        self._next_asset_id = next_asset_id
