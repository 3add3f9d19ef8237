"""Listing Manager — creates listings and takes the asset into escrow.

Creation-time invariants:
- ``price`` is a positive integer
- the attached fee equals the configured listing fee exactly
- the ledger takes custody of the asset before the listing commits

The fee is retained in the ledger's escrow account and paid to the operator
only when the listing sells.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from marketledger.bridge.payments import PaymentRail, PaymentRailError
from marketledger.bridge.registry import AssetRegistry, RegistryError
from marketledger.core.errors import (
    CustodyTransferFailed,
    DisbursementFailed,
    FeeMismatch,
    InvalidPrice,
    ReservedParty,
)
from marketledger.core.guard import MutationGuard, UnitOfWork
from marketledger.core.state import LedgerState
from marketledger.models.listing import Listing

if TYPE_CHECKING:
    from marketledger.core.store import LedgerStore

logger = logging.getLogger(__name__)


def is_amount(value: object) -> bool:
    """Whether *value* is an integer amount (``bool`` excluded)."""
    return isinstance(value, int) and not isinstance(value, bool)


class ListingManager:
    """Validates and records new listings.

    Parameters
    ----------
    state:
        The ledger state to mutate.
    guard:
        Mutation latch shared with every other mutating component.
    registry:
        Asset registry holding custody of listed assets.
    rail:
        Payment rail the listing fee is collected on.
    store:
        Optional durable store, written inside the unit of work.
    """

    def __init__(
        self,
        state: LedgerState,
        guard: MutationGuard,
        registry: AssetRegistry,
        rail: PaymentRail,
        store: LedgerStore | None = None,
    ) -> None:
        self._state = state
        self._guard = guard
        self._registry = registry
        self._rail = rail
        self._store = store

    def create_listing(
        self, caller: str, asset_id: int, price: int, fee_payment: int
    ) -> Listing:
        """Place *asset_id* into escrow and offer it at *price*.

        Returns the committed ``Listing``.

        Raises
        ------
        ReentrantCall
            If another mutating operation is in progress, whatever the
            other arguments are.
        ReservedParty
            If *caller* is the ledger's escrow identity.
        InvalidPrice
            If *price* is not a positive integer.
        FeeMismatch
            If *fee_payment* differs from the configured listing fee.
        DisbursementFailed
            If the fee cannot be collected from *caller*.
        CustodyTransferFailed
            If *caller* lacks authority over the asset or the registry
            refuses the transfer.
        """
        state = self._state
        with self._guard.hold("create_listing"):
            if caller == state.ledger_address:
                logger.warning("Rejected listing by the escrow identity '%s'.", caller)
                raise ReservedParty(
                    f"'{caller}' is the ledger's escrow identity and cannot list assets."
                )
            if not is_amount(price) or price <= 0:
                logger.warning("Rejected listing by '%s': invalid price %r.", caller, price)
                raise InvalidPrice(
                    f"Listing price must be a positive integer, got {price!r}."
                )
            if not is_amount(fee_payment) or fee_payment != state.listing_fee:
                logger.warning(
                    "Rejected listing by '%s': fee %r != %d.",
                    caller, fee_payment, state.listing_fee,
                )
                raise FeeMismatch(
                    f"Listing fee must be exactly {state.listing_fee}, got {fee_payment!r}."
                )

            with UnitOfWork(state, self._registry, self._rail):
                listing = Listing(
                    listing_id=state.allocate_listing_id(),
                    registry_ref=state.registry_ref,
                    asset_id=asset_id,
                    seller=caller,
                    owner=None,
                    price=price,
                    fee=fee_payment,
                )
                state.put(listing)

                if fee_payment:
                    try:
                        self._rail.collect(caller, state.ledger_address, fee_payment)
                    except PaymentRailError as exc:
                        raise DisbursementFailed(
                            f"Could not collect listing fee from '{caller}': {exc}"
                        ) from exc

                try:
                    self._registry.transfer_custody(
                        asset_id,
                        caller,
                        state.ledger_address,
                        operator=state.ledger_address,
                    )
                except RegistryError as exc:
                    raise CustodyTransferFailed(
                        f"Could not take custody of asset {asset_id} from '{caller}': {exc}"
                    ) from exc

                if self._store is not None:
                    self._store.save(state, [listing.listing_id])

        logger.info(
            "Listing %d created: asset %d by '%s' at %d.",
            listing.listing_id, asset_id, caller, price,
        )
        return listing
