"""Sales listing and summary statistics."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING

from pos_engine.dates import DateRange
from pos_engine.orders.pricing import round_money

if TYPE_CHECKING:
    from pos_engine.orders.repository import OrderRepository
    from pos_engine.orders.types import Order

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SalesSummary:
    """Headline numbers of a sales listing.

    Attributes:
        total_sales: Sum of order totals.
        order_count: Number of orders.
        average_ticket: total_sales / order_count, rounded to cents; 0 when
            there are no orders.
    """

    total_sales: Decimal
    order_count: int
    average_ticket: Decimal


def list_sales(repo: OrderRepository, date_range: DateRange | None = None) -> list[Order]:
    """Return every order in the range with its lines, newest first."""
    date_range = date_range or DateRange()
    orders = repo.query(date_range, newest_first=True)
    logger.info("Listed %d order(s) for %s", len(orders), date_range.describe())
    return orders


def sales_summary(orders: Sequence[Order]) -> SalesSummary:
    """Summarise a sales listing.

    Examples:
        >>> sales_summary([])
        SalesSummary(total_sales=Decimal('0.00'), order_count=0, average_ticket=Decimal('0.00'))

    """
    total = round_money(sum((o.total for o in orders), Decimal("0")))
    count = len(orders)
    average = round_money(total / count) if count else Decimal("0.00")
    return SalesSummary(total_sales=total, order_count=count, average_ticket=average)
