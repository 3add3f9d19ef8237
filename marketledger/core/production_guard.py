"""Production configuration guard — enforces hard constraints in production.

The guard validates that production-critical settings are correctly configured
before a ledger is opened.  It runs once at construction time and fails hard
(raises ``ProductionConfigError``) if any constraint is violated.

This module is the single enforcement point for production invariants.
Other code should not scatter ``if is_production`` checks.
"""

from __future__ import annotations

import logging

from marketledger.config import ProdConfig

logger = logging.getLogger(__name__)


class ProductionConfigError(RuntimeError):
    """Raised when production configuration constraints are violated.

    The ledger cannot safely start in production mode with the current
    configuration.  It must not be caught and ignored; the process should
    exit.
    """


def enforce_production_constraints(config: ProdConfig) -> None:
    """Validate all production-critical configuration constraints.

    Call this once at startup.  Outside production it returns immediately.

    Constraints enforced
    --------------------
    1. Debug mode must be disabled.
    2. An operator identity must be configured to receive listing fees.
    3. The listing fee must not be negative.

    Raises
    ------
    ProductionConfigError
        If any production constraint is violated.
    """
    if not config.is_production:
        return

    violations: list[str] = []

    if config.debug:
        violations.append(
            "debug=True is not allowed in production. "
            "Set MARKETLEDGER_DEBUG=false."
        )

    if not config.operator:
        violations.append(
            "An operator identity is required in production. "
            "Set MARKETLEDGER_OPERATOR."
        )

    if config.listing_fee < 0:
        violations.append(
            f"listing_fee={config.listing_fee} is negative. "
            "Set MARKETLEDGER_LISTING_FEE to 0 or more."
        )

    if violations:
        msg = (
            "Production configuration guard failed.\n"
            + "\n".join(f"  - {v}" for v in violations)
        )
        logger.critical(msg)
        raise ProductionConfigError(msg)

    logger.info("Production configuration guard passed.")
