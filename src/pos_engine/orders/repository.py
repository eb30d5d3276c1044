"""Order repository: atomic commit and read access to order history.

The repository exclusively owns the ``orders``, ``order_lines`` and
``order_sequences`` tables. A commit writes the header and every line in one
write transaction; readers use a single read transaction per call, so an
order without its lines (or lines without their order) is never observable.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

import pandas as pd

from pos_engine.config import DEFAULT_TAX_RATE
from pos_engine.dates import DateRange
from pos_engine.exceptions import InvalidCartError, NotFoundError, PersistenceError
from pos_engine.orders.modifiers import validate_selections
from pos_engine.orders.numbering import next_order_number
from pos_engine.orders.pricing import compute_totals
from pos_engine.orders.types import (
    CartLine,
    Order,
    OrderLine,
    Totals,
    dump_selections,
    load_selections,
)

if TYPE_CHECKING:
    from pos_engine.catalog.types import ModifierGroup
    from pos_engine.db import Database

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

LINE_FRAME_COLUMNS = [
    "order_id",
    "order_number",
    "created_at",
    "product_id",
    "product_name",
    "category",
    "quantity",
    "unit_price",
]

ORDER_FRAME_COLUMNS = ["order_id", "order_number", "created_at", "total"]


def _is_order_number_conflict(error: sqlite3.IntegrityError) -> bool:
    return "orders.order_number" in str(error)


def _row_to_line(row: sqlite3.Row) -> OrderLine:
    return OrderLine(
        line_id=row["id"],
        order_id=row["order_id"],
        product_id=row["product_id"],
        product_name=row["product_name"],
        category=row["category"],
        quantity=row["quantity"],
        unit_price=Decimal(row["unit_price"]),
        modifiers=load_selections(row["modifiers"]),
    )


def _row_to_order(row: sqlite3.Row, lines: Iterable[OrderLine]) -> Order:
    return Order(
        order_id=row["id"],
        order_number=row["order_number"],
        lines=tuple(lines),
        subtotal=Decimal(row["subtotal"]),
        tax=Decimal(row["tax"]),
        total=Decimal(row["total"]),
        payment_method=row["payment_method"],
        operator_id=row["operator_id"],
        created_at=datetime.strptime(row["created_at"], TIMESTAMP_FORMAT),
    )


class OrderRepository:
    """Durable store of committed orders.

    Args:
        db: Database handle; a connection is opened per operation.
        tax_rate: Tax fraction used to price every commit.
        max_retries: Commit attempts on order-number or lock conflicts before
            PersistenceError is raised.
        clock: Returns the local time used as ``created_at``.

    Example:
        >>> repo = OrderRepository(db)
        >>> order = repo.commit([line], "cash", "cajero")
        >>> order.order_number
        'ORD-20250115-0001'

    """

    def __init__(
        self,
        db: Database,
        tax_rate: Decimal = DEFAULT_TAX_RATE,
        max_retries: int = 3,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.db = db
        self.tax_rate = tax_rate
        self.max_retries = max_retries
        self.clock = clock or datetime.now

    # ------------------------------------------------------------------
    # Write path
    # ------------------------------------------------------------------

    def commit(
        self,
        lines: Iterable[CartLine],
        payment_method: str,
        operator_id: str,
        modifier_groups: Mapping[str, ModifierGroup] | None = None,
    ) -> Order:
        """Turn a cart into a committed order.

        All validation runs before the database is touched. The order number,
        header and lines are then written in a single write transaction.

        Args:
            lines: Cart lines carrying snapshot prices.
            payment_method: Opaque payment label.
            operator_id: Identifier of the operator ringing up the order.
            modifier_groups: If given, modifier selections are validated
                against these groups (keyed by name).

        Returns:
            The committed order with identifier, number and totals.

        Raises:
            InvalidCartError: If the cart or payment method is invalid.
            PersistenceError: If storage fails, or a conflict persists after
                ``max_retries`` attempts. Nothing is left behind in either case.

        """
        lines = list(lines)
        totals = compute_totals(lines, self.tax_rate)
        if not payment_method or not str(payment_method).strip():
            raise InvalidCartError("Payment method is required")
        if modifier_groups is not None:
            validate_selections(lines, modifier_groups)

        last_error: sqlite3.Error | None = None
        for attempt in range(1, self.max_retries + 1):
            created_at = self.clock().replace(microsecond=0)
            try:
                order = self._insert(lines, totals, payment_method, str(operator_id), created_at)
            except sqlite3.IntegrityError as e:
                if not _is_order_number_conflict(e):
                    logger.error("Commit failed: %s", e)
                    raise PersistenceError(f"Could not commit order: {e}") from e
                last_error = e
                logger.warning("Commit attempt %d/%d failed: %s", attempt, self.max_retries, e)
                continue
            except sqlite3.OperationalError as e:
                last_error = e
                logger.warning("Commit attempt %d/%d failed: %s", attempt, self.max_retries, e)
                continue
            except sqlite3.Error as e:
                logger.error("Commit failed: %s", e)
                raise PersistenceError(f"Could not commit order: {e}") from e

            logger.info(
                "Committed order %s: %d line(s), total %s, %s",
                order.order_number,
                len(order.lines),
                order.total,
                payment_method,
            )
            return order

        logger.error("Commit failed after %d attempts: %s", self.max_retries, last_error)
        raise PersistenceError(
            f"Could not commit order after {self.max_retries} attempts: {last_error}"
        ) from last_error

    def _insert(
        self,
        lines: list[CartLine],
        totals: Totals,
        payment_method: str,
        operator_id: str,
        created_at: datetime,
    ) -> Order:
        with self.db.transaction(write=True) as conn:
            order_number = next_order_number(conn, created_at)
            cursor = conn.execute(
                """
                INSERT INTO orders
                    (order_number, subtotal, tax, total, payment_method, operator_id, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    order_number,
                    str(totals.subtotal),
                    str(totals.tax),
                    str(totals.total),
                    payment_method,
                    operator_id,
                    created_at.strftime(TIMESTAMP_FORMAT),
                ),
            )
            order_id = cursor.lastrowid

            committed: list[OrderLine] = []
            for line in lines:
                cursor = conn.execute(
                    """
                    INSERT INTO order_lines
                        (order_id, product_id, product_name, category, quantity,
                         unit_price, modifiers)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        order_id,
                        line.product_id,
                        line.product_name,
                        line.category,
                        line.quantity,
                        str(line.unit_price),
                        dump_selections(line.modifiers),
                    ),
                )
                committed.append(
                    OrderLine(
                        line_id=cursor.lastrowid,
                        order_id=order_id,
                        product_id=line.product_id,
                        product_name=line.product_name,
                        category=line.category,
                        quantity=line.quantity,
                        unit_price=line.unit_price,
                        modifiers=dict(line.modifiers),
                    )
                )

        return Order(
            order_id=order_id,
            order_number=order_number,
            lines=tuple(committed),
            subtotal=totals.subtotal,
            tax=totals.tax,
            total=totals.total,
            payment_method=payment_method,
            operator_id=operator_id,
            created_at=created_at,
        )

    # ------------------------------------------------------------------
    # Read path
    # ------------------------------------------------------------------

    def query(self, date_range: DateRange | None = None, newest_first: bool = True) -> list[Order]:
        """Return orders created within the range, lines expanded.

        Args:
            date_range: Inclusive day-granularity filter; None means all orders.
            newest_first: Sort by creation time descending (default) or ascending.

        Returns:
            List of orders.

        """
        clause, params = (date_range or DateRange()).sql_clause("o.created_at")
        direction = "DESC" if newest_first else "ASC"

        try:
            with self.db.transaction() as conn:
                headers = conn.execute(
                    f"SELECT o.* FROM orders o WHERE 1=1{clause} "
                    f"ORDER BY o.created_at {direction}, o.id {direction}",
                    params,
                ).fetchall()
                line_rows = conn.execute(
                    "SELECT l.* FROM order_lines l JOIN orders o ON o.id = l.order_id "
                    f"WHERE 1=1{clause} ORDER BY l.id",
                    params,
                ).fetchall()
        except sqlite3.Error as e:
            raise PersistenceError(f"Could not read orders: {e}") from e

        lines_by_order: dict[int, list[OrderLine]] = {}
        for row in line_rows:
            lines_by_order.setdefault(row["order_id"], []).append(_row_to_line(row))

        logger.debug("Loaded %d order(s) with %d line(s)", len(headers), len(line_rows))
        return [_row_to_order(h, lines_by_order.get(h["id"], [])) for h in headers]

    def get(self, order_id: int) -> Order:
        """Return one order by identifier.

        Raises:
            NotFoundError: If no order has that identifier.

        """
        try:
            with self.db.transaction() as conn:
                header = conn.execute("SELECT * FROM orders WHERE id = ?", (order_id,)).fetchone()
                line_rows = conn.execute(
                    "SELECT * FROM order_lines WHERE order_id = ? ORDER BY id", (order_id,)
                ).fetchall()
        except sqlite3.Error as e:
            raise PersistenceError(f"Could not read order {order_id}: {e}") from e

        if header is None:
            raise NotFoundError(f"Order {order_id} not found")
        return _row_to_order(header, [_row_to_line(r) for r in line_rows])

    def load_lines_frame(self, date_range: DateRange | None = None) -> pd.DataFrame:
        """Load committed lines in the range as a DataFrame (one row per line).

        Money is returned as float; ``created_at`` as datetime64.
        """
        clause, params = (date_range or DateRange()).sql_clause("o.created_at")
        sql = (
            "SELECT l.order_id, o.order_number, o.created_at, l.product_id, l.product_name, "
            "l.category, l.quantity, CAST(l.unit_price AS REAL) AS unit_price "
            "FROM order_lines l JOIN orders o ON o.id = l.order_id "
            f"WHERE 1=1{clause} ORDER BY l.id"
        )
        return self._read_frame(sql, params, LINE_FRAME_COLUMNS)

    def load_orders_frame(self, date_range: DateRange | None = None) -> pd.DataFrame:
        """Load order headers in the range as a DataFrame (one row per order)."""
        clause, params = (date_range or DateRange()).sql_clause("o.created_at")
        sql = (
            "SELECT o.id AS order_id, o.order_number, o.created_at, "
            "CAST(o.total AS REAL) AS total "
            f"FROM orders o WHERE 1=1{clause} ORDER BY o.created_at, o.id"
        )
        return self._read_frame(sql, params, ORDER_FRAME_COLUMNS)

    def _read_frame(self, sql: str, params: list[str], columns: list[str]) -> pd.DataFrame:
        try:
            with self.db.transaction() as conn:
                df = pd.read_sql_query(sql, conn, params=params)
        except (sqlite3.Error, pd.errors.DatabaseError) as e:
            raise PersistenceError(f"Could not read order history: {e}") from e

        if df.empty:
            df = pd.DataFrame(columns=columns)
        df["created_at"] = pd.to_datetime(df["created_at"], format=TIMESTAMP_FORMAT)
        return df
