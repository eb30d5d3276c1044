"""Order number allocation.

Numbers look like ``ORD-20250115-0001``: the creation date plus a counter
that restarts each day. The counter lives in the ``order_sequences`` table and
is advanced inside the same write transaction that inserts the order, so two
committed orders can never share a number.
"""

from __future__ import annotations

import sqlite3
from datetime import date, datetime

ORDER_NUMBER_PREFIX = "ORD"


def format_order_number(day: date, sequence: int, prefix: str = ORDER_NUMBER_PREFIX) -> str:
    """Format an order number.

    Examples:
        >>> format_order_number(date(2025, 1, 15), 7)
        'ORD-20250115-0007'

    """
    return f"{prefix}-{day:%Y%m%d}-{sequence:04d}"


def next_order_number(
    conn: sqlite3.Connection,
    created_at: datetime,
    prefix: str = ORDER_NUMBER_PREFIX,
) -> str:
    """Advance the day's counter and return the new order number.

    Must be called inside a write transaction (BEGIN IMMEDIATE); the counter
    update is rolled back together with the order if the commit fails.
    """
    day = created_at.date()
    key = day.isoformat()
    conn.execute("INSERT OR IGNORE INTO order_sequences (day, last_value) VALUES (?, 0)", (key,))
    conn.execute("UPDATE order_sequences SET last_value = last_value + 1 WHERE day = ?", (key,))
    (sequence,) = conn.execute(
        "SELECT last_value FROM order_sequences WHERE day = ?", (key,)
    ).fetchone()
    return format_order_number(day, sequence, prefix)
