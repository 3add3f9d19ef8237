"""Marketplace error taxonomy.

Every rejection raised by the ledger is a synchronous, caller-visible
``MarketplaceError``.  None are retried internally; a failed mutating call
leaves ledger state exactly as it was before the call began.
"""

from __future__ import annotations


class MarketplaceError(RuntimeError):
    """Base class for all ledger rejections."""


class InvalidPrice(MarketplaceError):
    """Raised when a listing price is not a positive integer."""


class FeeMismatch(MarketplaceError):
    """Raised when the attached fee does not equal the configured listing fee."""


class PaymentMismatch(MarketplaceError):
    """Raised when a sale payment does not equal the listing price exactly."""


class UnknownOrAlreadySold(MarketplaceError):
    """Raised when a sale targets a listing that does not exist or is sold."""


class ReentrantCall(MarketplaceError):
    """Raised when a mutating call starts while another is still in flight."""


class CustodyTransferFailed(MarketplaceError):
    """Raised when the asset registry refuses a custody transfer."""


class DisbursementFailed(MarketplaceError):
    """Raised when the payment rail fails to collect or disburse funds."""


class ListingNotFound(MarketplaceError, KeyError):
    """Raised by lookups for a ``listing_id`` that was never created.

    Not a fault: callers asking for an absent id get this as a normal
    outcome.  Subclasses ``KeyError`` so mapping-style callers can catch it.
    """

    def __str__(self) -> str:
        return RuntimeError.__str__(self)


class LedgerConfigMismatch(MarketplaceError):
    """Raised when a persisted ledger was created with a different fee/operator."""


class ReservedParty(MarketplaceError):
    """Raised when a caller or buyer acts as the ledger's own escrow identity."""
