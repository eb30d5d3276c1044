"""Order entities: transient cart lines and committed, immutable orders."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pos_engine.catalog.types import Product

# group name -> selected option labels
ModifierSelections = Mapping[str, frozenset[str]]


def normalize_selections(raw: Mapping[str, Iterable[str]] | None) -> dict[str, frozenset[str]]:
    """Turn any group -> options mapping into group -> frozenset.

    A bare string is treated as a single option, not as characters.
    Groups with no selected option are dropped.
    """
    if not raw:
        return {}
    result: dict[str, frozenset[str]] = {}
    for group, options in raw.items():
        selected = frozenset([options]) if isinstance(options, str) else frozenset(options)
        if selected:
            result[group] = selected
    return result


def dump_selections(selections: ModifierSelections) -> str:
    """Serialise selections as canonical JSON (sorted groups and options)."""
    return json.dumps(
        {group: sorted(options) for group, options in sorted(selections.items())},
        ensure_ascii=False,
    )


def load_selections(text: str | None) -> dict[str, frozenset[str]]:
    if not text:
        return {}
    return normalize_selections(json.loads(text))


@dataclass(frozen=True)
class CartLine:
    """One product selection in a cart, before checkout.

    Attributes:
        product_id: Catalog identifier of the product.
        product_name: Name captured when the line was built.
        unit_price: Snapshot unit price, independent of later catalog changes.
        quantity: Units ordered, at least 1.
        category: Category captured when the line was built.
        modifiers: Modifier-group name -> selected option labels.
    """

    product_id: int
    product_name: str
    unit_price: Decimal
    quantity: int = 1
    category: str = ""
    modifiers: ModifierSelections = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.unit_price, Decimal):
            object.__setattr__(self, "unit_price", Decimal(str(self.unit_price)))
        object.__setattr__(self, "modifiers", normalize_selections(self.modifiers))

    @classmethod
    def from_product(
        cls,
        product: Product,
        quantity: int = 1,
        modifiers: Mapping[str, Iterable[str]] | None = None,
    ) -> CartLine:
        """Build a line from a catalog product, snapshotting name, category and price."""
        return cls(
            product_id=product.product_id,
            product_name=product.name,
            unit_price=product.price,
            quantity=quantity,
            category=product.category,
            modifiers=normalize_selections(modifiers),
        )

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class Totals:
    """Subtotal, tax and total of a cart, rounded to cents."""

    subtotal: Decimal
    tax: Decimal
    total: Decimal


@dataclass(frozen=True)
class OrderLine:
    """A committed line item. Created with its order, never changed."""

    line_id: int
    order_id: int
    product_id: int
    product_name: str
    category: str
    quantity: int
    unit_price: Decimal
    modifiers: ModifierSelections = field(default_factory=dict)

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class Order:
    """An immutable, committed order.

    Attributes:
        order_id: Storage identifier.
        order_number: Human-readable number, unique across all orders
            (``ORD-YYYYMMDD-NNNN``).
        lines: Committed line items in cart order.
        subtotal: Stored subtotal.
        tax: Stored tax.
        total: Stored total, equal to subtotal + tax.
        payment_method: Opaque payment label ("cash", "card", ...).
        operator_id: Identifier of the operator who rang up the order.
        created_at: Local creation time, second precision.
    """

    order_id: int
    order_number: str
    lines: tuple[OrderLine, ...]
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    payment_method: str
    operator_id: str
    created_at: datetime

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)
