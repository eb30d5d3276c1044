"""Orders domain module.

- **CartLine**: transient cart selection with a snapshot price.
- **compute_totals**: pure pricing (subtotal, tax, total).
- **OrderRepository**: atomic commit and read access to committed orders.

Example:
    >>> from decimal import Decimal
    >>> from pos_engine.orders import CartLine, compute_totals
    >>> line = CartLine(product_id=1, product_name="Burger", unit_price=Decimal("85.00"), quantity=2)
    >>> compute_totals([line], Decimal("0.16")).total
    Decimal('197.20')
"""

from pos_engine.orders.pricing import compute_totals
from pos_engine.orders.repository import OrderRepository
from pos_engine.orders.types import CartLine, Order, OrderLine, Totals

__all__ = [
    "CartLine",
    "Order",
    "OrderLine",
    "OrderRepository",
    "Totals",
    "compute_totals",
]
