"""Sale Executor — the atomic payment-for-custody swap.

Ordering follows checks, then effects, then interactions: the listing is
marked sold and ``sold_count`` incremented *before* any call into the payment
rail or asset registry.  Those calls may run receiver code that re-enters
the ledger; the global mutation guard rejects any such attempt, and the
unit of work reverts every participant if any step fails.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from marketledger.bridge.payments import PaymentRail, PaymentRailError
from marketledger.bridge.registry import AssetRegistry, RegistryError
from marketledger.core.errors import (
    CustodyTransferFailed,
    DisbursementFailed,
    PaymentMismatch,
    ReservedParty,
    UnknownOrAlreadySold,
)
from marketledger.core.guard import MutationGuard, UnitOfWork
from marketledger.core.listing_manager import is_amount
from marketledger.core.state import LedgerState
from marketledger.models.listing import Listing

if TYPE_CHECKING:
    from marketledger.core.store import LedgerStore

logger = logging.getLogger(__name__)


class SaleExecutor:
    """Executes sales against unsold listings.

    Parameters
    ----------
    state:
        The ledger state to mutate.
    guard:
        Mutation latch shared with every other mutating component.
    registry:
        Asset registry the escrowed asset is released through.
    rail:
        Payment rail used to collect the payment and pay out proceeds.
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

    def execute_sale(self, buyer: str, listing_id: int, payment: int) -> Listing:
        """Swap *payment* from *buyer* for custody of the listed asset.

        Steps, all inside one unit of work:

        1. mark the listing sold to *buyer* and increment ``sold_count``
        2. collect *payment* from *buyer* into escrow
        3. disburse *payment* to the seller
        4. release custody of the asset to *buyer*
        5. disburse the fee retained at listing time to the operator

        Returns the sold ``Listing``.

        Raises
        ------
        ReentrantCall
            If another mutating operation is in progress.
        ReservedParty
            If *buyer* is the ledger's escrow identity.
        UnknownOrAlreadySold
            If *listing_id* was never created or has already sold.
        PaymentMismatch
            If *payment* is not exactly the listing price.
        DisbursementFailed
            If the rail fails to collect or pay out any amount.
        CustodyTransferFailed
            If the registry refuses to release the asset.
        """
        state = self._state
        with self._guard.hold("execute_sale"):
            if buyer == state.ledger_address:
                logger.warning(
                    "Rejected sale of listing %r to the escrow identity '%s'.",
                    listing_id, buyer,
                )
                raise ReservedParty(
                    f"'{buyer}' is the ledger's escrow identity and cannot buy."
                )
            listing = state.get(listing_id)
            if listing is None or listing.is_sold:
                logger.warning(
                    "Rejected sale of listing %r to '%s': unknown or already sold.",
                    listing_id, buyer,
                )
                raise UnknownOrAlreadySold(
                    f"Listing {listing_id!r} does not exist or has already sold."
                )
            if not is_amount(payment) or payment != listing.price:
                logger.warning(
                    "Rejected sale of listing %d to '%s': payment %r != price %d.",
                    listing_id, buyer, payment, listing.price,
                )
                raise PaymentMismatch(
                    f"Listing {listing_id} costs exactly {listing.price}, got {payment!r}."
                )

            with UnitOfWork(state, self._registry, self._rail):
                sold = listing.mark_sold(buyer)
                state.put(sold)
                state.sold_count += 1

                escrow = state.ledger_address
                self._pay(self._rail.collect, buyer, escrow, payment, "collect payment")
                self._pay(self._rail.disburse, escrow, listing.seller, payment, "pay seller")

                try:
                    self._registry.transfer_custody(
                        listing.asset_id, escrow, buyer, operator=escrow
                    )
                except RegistryError as exc:
                    raise CustodyTransferFailed(
                        f"Could not release asset {listing.asset_id} to '{buyer}': {exc}"
                    ) from exc

                if listing.fee:
                    self._pay(
                        self._rail.disburse, escrow, state.operator, listing.fee,
                        "pay operator fee",
                    )

                if self._store is not None:
                    self._store.save(state, [listing_id])

        logger.info(
            "Listing %d sold to '%s' for %d (fee %d to '%s').",
            listing_id, buyer, payment, listing.fee, state.operator,
        )
        return sold

    @staticmethod
    def _pay(transfer, from_party: str, to_party: str, amount: int, step: str) -> None:
        try:
            transfer(from_party, to_party, amount)
        except PaymentRailError as exc:
            raise DisbursementFailed(
                f"Failed to {step} ({amount} from '{from_party}' to '{to_party}'): {exc}"
            ) from exc
