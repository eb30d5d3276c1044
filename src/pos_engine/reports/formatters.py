"""Console output formatting for reports."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import pandas as pd

from pos_engine.reports.sales import sales_summary

if TYPE_CHECKING:
    from pos_engine.orders.types import Order

RULE = "=" * 60


def format_sales_for_console(orders: Sequence[Order], title: str = "Ventas") -> str:
    """Build a human-readable sales listing with its summary line.

    Args:
        orders: Orders as returned by list_sales (newest first).
        title: Heading printed above the listing.

    Returns:
        Text block for console output.
    """
    summary = sales_summary(orders)
    lines = [title, RULE]
    lines.append(
        f"Ventas totales: ${summary.total_sales:,.2f}   "
        f"Ordenes: {summary.order_count}   "
        f"Ticket promedio: ${summary.average_ticket:,.2f}"
    )
    lines.append("")

    if not orders:
        lines.append("No hay ventas en el periodo.")
        return "\n".join(lines)

    for order in orders:
        lines.append(
            f"{order.order_number}  {order.created_at:%Y-%m-%d %H:%M}  "
            f"{order.payment_method:<8} ${order.total:>10,.2f}"
        )
        for line in order.lines:
            lines.append(f"    {line.quantity} x {line.product_name} @ ${line.unit_price:,.2f}")
            for group, options in sorted(line.modifiers.items()):
                lines.append(f"        {group}: {', '.join(sorted(options))}")
    return "\n".join(lines)


def format_ranking_for_console(df: pd.DataFrame, title: str) -> str:
    """Build a numbered product ranking (top or bottom sellers)."""
    lines = [title, RULE]
    if df.empty:
        lines.append("Sin datos.")
        return "\n".join(lines)

    for position, row in enumerate(df.itertuples(index=False), start=1):
        lines.append(
            f"{position:>2}. {row.name:<30} {row.category:<10} "
            f"{row.total_quantity:>5} uds  ${row.total_revenue:>10,.2f}"
        )
    return "\n".join(lines)


def format_daily_for_console(df: pd.DataFrame, title: str = "Ventas por dia") -> str:
    """Build the daily sales series as one line per date."""
    lines = [title, RULE]
    if df.empty:
        lines.append("Sin datos.")
        return "\n".join(lines)

    for row in df.itertuples(index=False):
        lines.append(f"{row.date:%d %b %Y}  {row.order_count:>4} ordenes  ${row.total_sales:>10,.2f}")
    return "\n".join(lines)
