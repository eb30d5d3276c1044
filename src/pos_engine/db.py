"""SQLite storage for the POS order engine.

This module owns the database schema and hands out scoped units of work.
There is no process-wide connection: every operation opens its own
connection through ``Database.transaction()``, which commits on success,
rolls back on any exception and always closes the connection.

Tables:
    products          Catalog products (owned by the catalog store)
    modifier_groups   Catalog modifier groups, options as JSON
    orders            Order headers, unique order_number
    order_lines       Committed line items, FK to orders
    order_sequences   Durable per-day counter for order numbers
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from pos_engine.exceptions import PersistenceError

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS products (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    category TEXT NOT NULL,
    price TEXT NOT NULL,
    available INTEGER NOT NULL DEFAULT 1
);

CREATE TABLE IF NOT EXISTS modifier_groups (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT UNIQUE NOT NULL,
    kind TEXT NOT NULL CHECK (kind IN ('single-choice', 'multi-choice')),
    options TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS orders (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    order_number TEXT UNIQUE NOT NULL,
    subtotal TEXT NOT NULL,
    tax TEXT NOT NULL,
    total TEXT NOT NULL,
    payment_method TEXT NOT NULL,
    operator_id TEXT NOT NULL,
    created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_orders_created_at ON orders (created_at);

CREATE TABLE IF NOT EXISTS order_lines (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    order_id INTEGER NOT NULL,
    product_id INTEGER NOT NULL,
    product_name TEXT NOT NULL,
    category TEXT NOT NULL,
    quantity INTEGER NOT NULL CHECK (quantity >= 1),
    unit_price TEXT NOT NULL,
    modifiers TEXT NOT NULL DEFAULT '{}',
    FOREIGN KEY (order_id) REFERENCES orders (id)
);

CREATE INDEX IF NOT EXISTS idx_order_lines_order_id ON order_lines (order_id);

CREATE TABLE IF NOT EXISTS order_sequences (
    day TEXT PRIMARY KEY,
    last_value INTEGER NOT NULL
);
"""


class Database:
    """Handle on one SQLite database file.

    The handle itself holds no connection, so it is safe to share between
    threads; each unit of work gets a fresh connection.

    Example:
        >>> db = Database(Path("data/restaurant-pos.db"))
        >>> db.init_schema()
        >>> with db.transaction(write=True) as conn:
        ...     conn.execute("INSERT INTO order_sequences VALUES ('2025-01-15', 0)")

    """

    def __init__(self, path: str | Path, timeout: float = 5.0) -> None:
        self.path = Path(path)
        self.timeout = timeout

    def _connect(self) -> sqlite3.Connection:
        # isolation_level=None: transactions are opened explicitly below
        conn = sqlite3.connect(str(self.path), timeout=self.timeout, isolation_level=None)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def init_schema(self) -> None:
        """Create all tables and switch the file to WAL journaling.

        Raises:
            PersistenceError: If the database cannot be opened or written.

        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            conn = self._connect()
            try:
                # readers keep a snapshot while a writer commits
                conn.execute("PRAGMA journal_mode = WAL")
                conn.executescript(SCHEMA)
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.error("Could not initialise database %s: %s", self.path, e)
            raise PersistenceError(f"Could not initialise database {self.path}: {e}") from e
        logger.debug("Schema ready at %s", self.path)

    @contextmanager
    def transaction(self, *, write: bool = False) -> Iterator[sqlite3.Connection]:
        """Open a connection and run one transaction on it.

        Args:
            write: If True, take the write lock up front (BEGIN IMMEDIATE) so
                concurrent writers are serialised for the whole unit of work.
                Read transactions use a deferred BEGIN and see one snapshot.

        Yields:
            The connection, inside an open transaction.

        Raises:
            sqlite3.Error: Propagated unchanged so callers can decide on retries.

        """
        conn = self._connect()
        try:
            conn.execute("BEGIN IMMEDIATE" if write else "BEGIN")
            yield conn
            conn.execute("COMMIT")
        except BaseException:
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            raise
        finally:
            conn.close()
