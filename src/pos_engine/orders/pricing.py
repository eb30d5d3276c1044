"""Pricing calculator: subtotal, tax and total of a cart.

Pure functions only. No I/O, no clock, no catalog access, so identical input
always produces identical output.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from pos_engine.exceptions import InvalidCartError
from pos_engine.orders.types import CartLine, Totals

CENTS = Decimal("0.01")


def round_money(amount: Decimal) -> Decimal:
    """Round to currency precision (2 places, half up).

    Examples:
        >>> round_money(Decimal("27.195"))
        Decimal('27.20')

    """
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def validate_lines(lines: Sequence[CartLine]) -> None:
    """Check the cart can be checked out.

    Raises:
        InvalidCartError: If the cart is empty, or a line has no product
            identifier or name, a quantity below 1, or a unit price that is
            negative or not a finite number.

    """
    if not lines:
        raise InvalidCartError("Cart is empty")
    for position, line in enumerate(lines, start=1):
        if isinstance(line.product_id, bool) or not isinstance(line.product_id, int):
            raise InvalidCartError(
                f"Line {position}: product id must be an integer, got {line.product_id!r}"
            )
        if not isinstance(line.product_name, str) or not line.product_name.strip():
            raise InvalidCartError(
                f"Line {position}: product name is required, got {line.product_name!r}"
            )
        if not isinstance(line.category, str):
            raise InvalidCartError(
                f"Line {position} ({line.product_name}): category must be text, "
                f"got {line.category!r}"
            )
        if isinstance(line.quantity, bool) or not isinstance(line.quantity, int):
            raise InvalidCartError(
                f"Line {position} ({line.product_name}): quantity must be an integer, "
                f"got {line.quantity!r}"
            )
        if line.quantity < 1:
            raise InvalidCartError(
                f"Line {position} ({line.product_name}): quantity must be at least 1, "
                f"got {line.quantity}"
            )
        if not line.unit_price.is_finite():
            raise InvalidCartError(
                f"Line {position} ({line.product_name}): unit price must be a finite number, "
                f"got {line.unit_price}"
            )
        if line.unit_price < 0:
            raise InvalidCartError(
                f"Line {position} ({line.product_name}): unit price must be non-negative, "
                f"got {line.unit_price}"
            )


def compute_totals(lines: Sequence[CartLine], tax_rate: Decimal) -> Totals:
    """Compute subtotal, tax and total for a cart.

    The subtotal is summed exactly and rounded once; tax is computed from the
    rounded subtotal. ``total == subtotal + tax`` holds exactly.

    Args:
        lines: Cart lines with snapshot unit prices.
        tax_rate: Tax fraction, e.g. Decimal("0.16").

    Returns:
        Totals rounded to cents.

    Raises:
        InvalidCartError: If validation fails (see validate_lines) or the
            tax rate is negative.

    Examples:
        >>> line = CartLine(product_id=1, product_name="Burger", unit_price=Decimal("85.00"), quantity=2)
        >>> compute_totals([line], Decimal("0.16"))
        Totals(subtotal=Decimal('170.00'), tax=Decimal('27.20'), total=Decimal('197.20'))

    """
    validate_lines(lines)
    rate = tax_rate if isinstance(tax_rate, Decimal) else Decimal(str(tax_rate))
    if rate < 0:
        raise InvalidCartError(f"Tax rate must be non-negative, got {rate}")

    subtotal = round_money(sum((line.line_total for line in lines), Decimal("0")))
    tax = round_money(subtotal * rate)
    return Totals(subtotal=subtotal, tax=tax, total=subtotal + tax)
