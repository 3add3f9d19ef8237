"""Marketledger: escrowed fixed-price marketplace for uniquely-owned assets.

A seller places an asset into the ledger's custody and offers it at a fixed
price; a buyer swaps exact payment for custody in one atomic step:
  - Exact-match listing fee and sale payment (no partial or excess payments)
  - Checks-effects-interactions ordering under a global mutation guard
  - All-or-nothing rollback of ledger state, registry, and payment rail
  - Listing fee retained at creation, paid to the operator on sale
  - Lazy, restartable catalog views (unsold, owned by, created by)
  - Optional SQLite persistence, env-driven config, Typer + Rich CLI
"""

__version__ = "0.1.0"
__description__ = "Escrowed fixed-price marketplace ledger for unique assets"

from marketledger.core.ledger import MarketplaceLedger
from marketledger.models.listing import Listing
from marketledger.cli.app import app as cli

__all__ = ["MarketplaceLedger", "Listing", "cli", "__version__"]
