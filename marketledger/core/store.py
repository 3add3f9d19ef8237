"""Durable ledger store backed by SQLite.

Persists the three pieces of ledger state that must survive across calls:
the ``listing_id -> Listing`` mapping, the two counters, and the
fee/operator configuration.

Design:
- Listings are only ever inserted or have their owner set once; rows are
  never deleted.
- ``save()`` writes the changed listings and the counters in one SQLite
  transaction, so a crash cannot persist half a mutation.
- WAL journal mode for concurrent readers (CLI queries while a ledger runs).
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

from marketledger.core.state import LedgerState
from marketledger.models.listing import Listing

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# DDL
# ---------------------------------------------------------------------------

_CREATE_LISTINGS = """
CREATE TABLE IF NOT EXISTS listings (
    listing_id    INTEGER PRIMARY KEY,
    registry_ref  TEXT NOT NULL,
    asset_id      INTEGER NOT NULL,
    seller        TEXT NOT NULL,
    owner         TEXT,
    price         INTEGER NOT NULL CHECK (price > 0),
    fee           INTEGER NOT NULL DEFAULT 0,
    created_at    TEXT NOT NULL,
    sold_at       TEXT
);
"""

_CREATE_META = """
CREATE TABLE IF NOT EXISTS ledger_meta (
    id               INTEGER PRIMARY KEY CHECK (id = 1),
    listing_fee      INTEGER NOT NULL,
    operator         TEXT NOT NULL,
    ledger_address   TEXT NOT NULL,
    registry_ref     TEXT NOT NULL,
    next_listing_id  INTEGER NOT NULL,
    sold_count       INTEGER NOT NULL
);
"""

_CREATE_IDX_OWNER = """
CREATE INDEX IF NOT EXISTS idx_owner ON listings(owner, listing_id);
"""


class LedgerStore:
    """SQLite persistence for a single marketplace ledger.

    Parameters
    ----------
    db_path:
        Path to the SQLite database file. Created if it does not exist.
    """

    def __init__(self, db_path: Path) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    @property
    def db_path(self) -> Path:
        return self._db_path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), check_same_thread=False)
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _init_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(_CREATE_LISTINGS)
            conn.execute(_CREATE_META)
            conn.execute(_CREATE_IDX_OWNER)
            conn.commit()

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def save(self, state: LedgerState, changed_ids: Iterable[int] = ()) -> None:
        """Persist the counters and the listings named in *changed_ids*.

        Everything is written in a single transaction.
        """
        rows = [self._listing_to_row(state.listings[i]) for i in changed_ids]
        conn = self._connect()
        try:
            with conn:
                conn.execute(
                    """
                    INSERT INTO ledger_meta
                        (id, listing_fee, operator, ledger_address, registry_ref,
                         next_listing_id, sold_count)
                    VALUES (1, ?, ?, ?, ?, ?, ?)
                    ON CONFLICT(id) DO UPDATE SET
                        next_listing_id = excluded.next_listing_id,
                        sold_count = excluded.sold_count
                    """,
                    (
                        state.listing_fee,
                        state.operator,
                        state.ledger_address,
                        state.registry_ref,
                        state.next_listing_id,
                        state.sold_count,
                    ),
                )
                conn.executemany(
                    """
                    INSERT INTO listings
                        (listing_id, registry_ref, asset_id, seller, owner,
                         price, fee, created_at, sold_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    ON CONFLICT(listing_id) DO UPDATE SET
                        owner = excluded.owner,
                        sold_at = excluded.sold_at
                    """,
                    rows,
                )
        finally:
            conn.close()
        logger.debug("Persisted %d listing(s) to %s.", len(rows), self._db_path)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def load(self) -> LedgerState | None:
        """Rebuild the ledger state, or return ``None`` if nothing is stored."""
        with self._connect() as conn:
            meta = conn.execute(
                "SELECT listing_fee, operator, ledger_address, registry_ref, "
                "next_listing_id, sold_count FROM ledger_meta WHERE id = 1"
            ).fetchone()
            if meta is None:
                return None
            rows = conn.execute(
                "SELECT * FROM listings ORDER BY listing_id ASC"
            ).fetchall()

        listing_fee, operator, ledger_address, registry_ref, next_id, sold = meta
        state = LedgerState(
            listing_fee=listing_fee,
            operator=operator,
            ledger_address=ledger_address,
            registry_ref=registry_ref,
        )
        state.next_listing_id = next_id
        state.sold_count = sold
        for row in rows:
            state.put(self._row_to_listing(row))
        logger.info(
            "Loaded %d listing(s) from %s (%d sold).",
            len(state.listings),
            self._db_path,
            state.sold_count,
        )
        return state

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _listing_to_row(listing: Listing) -> tuple:
        return (
            listing.listing_id,
            listing.registry_ref,
            listing.asset_id,
            listing.seller,
            listing.owner,
            listing.price,
            listing.fee,
            listing.created_at.isoformat(),
            listing.sold_at.isoformat() if listing.sold_at else None,
        )

    @staticmethod
    def _row_to_listing(row: tuple) -> Listing:
        (
            listing_id,
            registry_ref,
            asset_id,
            seller,
            owner,
            price,
            fee,
            created_at,
            sold_at,
        ) = row
        return Listing(
            listing_id=listing_id,
            registry_ref=registry_ref,
            asset_id=asset_id,
            seller=seller,
            owner=owner,
            price=price,
            fee=fee,
            created_at=datetime.fromisoformat(created_at),
            sold_at=datetime.fromisoformat(sold_at) if sold_at else None,
        )
