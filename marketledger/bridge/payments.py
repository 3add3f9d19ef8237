"""Payment rail backends — balances in the platform's native payment unit.

The ledger *collects* value attached to a call (listing fee, sale payment)
into its own escrow account and *disburses* it to sellers and the operator.
Both operations are plain transfers on the rail; the distinction is the
direction relative to the ledger.

As with the asset registry, receive hooks stand in for receiver code that
runs when a party is paid.  A hook that raises makes the transfer fail.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)

PaymentHook = Callable[[str, str, int], None]  # (from_party, to_party, amount)


class PaymentRailError(RuntimeError):
    """Raised when a transfer on the rail cannot complete."""


class InsufficientFunds(PaymentRailError):
    """Raised when the paying party's balance is below the amount."""


class ReceiverRejected(PaymentRailError):
    """Raised when the receiving party's hook fails."""


@runtime_checkable
class PaymentRail(Protocol):
    """Protocol for payment rail backends."""

    def balance_of(self, party: str) -> int:
        ...

    def collect(self, from_party: str, to_party: str, amount: int) -> None:
        """Take *amount* attached by *from_party* into *to_party*'s account."""
        ...

    def disburse(self, from_party: str, to_party: str, amount: int) -> None:
        """Pay *amount* out of *from_party*'s account to *to_party*."""
        ...


class InMemoryPaymentRail:
    """Dict-backed account balances.

    Examples
    --------
    >>> rail = InMemoryPaymentRail()
    >>> rail.deposit("bob", 100)
    >>> rail.disburse("bob", "alice", 40)
    >>> rail.balance_of("alice")
    40
    """

    def __init__(self) -> None:
        self._balances: dict[str, int] = {}
        self._hooks: dict[str, PaymentHook] = {}

    def deposit(self, party: str, amount: int) -> None:
        """Credit *party* with newly issued funds."""
        if amount < 0:
            raise PaymentRailError(f"Cannot deposit a negative amount ({amount}).")
        self._balances[party] = self._balances.get(party, 0) + amount

    def balance_of(self, party: str) -> int:
        return self._balances.get(party, 0)

    def collect(self, from_party: str, to_party: str, amount: int) -> None:
        self._transfer(from_party, to_party, amount)

    def disburse(self, from_party: str, to_party: str, amount: int) -> None:
        self._transfer(from_party, to_party, amount)

    def _transfer(self, from_party: str, to_party: str, amount: int) -> None:
        if amount < 0:
            raise PaymentRailError(f"Cannot transfer a negative amount ({amount}).")
        available = self._balances.get(from_party, 0)
        if available < amount:
            raise InsufficientFunds(
                f"'{from_party}' holds {available}, cannot pay {amount}."
            )
        self._balances[from_party] = available - amount
        self._balances[to_party] = self._balances.get(to_party, 0) + amount
        logger.debug("Paid %d: '%s' -> '%s'.", amount, from_party, to_party)

        hook = self._hooks.get(to_party)
        if hook is not None:
            try:
                hook(from_party, to_party, amount)
            except Exception as exc:
                raise ReceiverRejected(
                    f"Receiver '{to_party}' rejected payment of {amount}: {exc}"
                ) from exc

    # -- Receiver code ------------------------------------------------------

    def on_receive(self, party: str, hook: PaymentHook | None) -> None:
        """Register (or clear, with ``None``) the receive hook for *party*."""
        if hook is None:
            self._hooks.pop(party, None)
        else:
            self._hooks[party] = hook

    # -- Revertible ---------------------------------------------------------

    def snapshot(self) -> dict[str, int]:
        return dict(self._balances)

    def restore(self, token: dict[str, int]) -> None:
        self._balances = dict(token)
