"""Catalog entities read by the order engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum


class SelectionKind(str, Enum):
    """How many options of a modifier group a cart line may select."""

    SINGLE = "single-choice"
    MULTI = "multi-choice"

    @classmethod
    def parse(cls, value: str) -> SelectionKind:
        """Accept the stored values plus the radio/checkbox aliases."""
        aliases = {"radio": cls.SINGLE, "checkbox": cls.MULTI}
        if value in aliases:
            return aliases[value]
        return cls(value)


@dataclass(frozen=True)
class Product:
    """A sellable product.

    Attributes:
        product_id: Catalog identifier.
        name: Display name.
        category: Category label (e.g. "Comida", "Bebida").
        price: Unit price, non-negative.
        available: Whether the product is currently offered.
    """

    product_id: int
    name: str
    category: str
    price: Decimal
    available: bool = True


@dataclass(frozen=True)
class ModifierOption:
    # price_delta is reserved; totals never apply it
    label: str
    price_delta: Decimal = Decimal("0")


@dataclass(frozen=True)
class ModifierGroup:
    """A named set of customisation options (size, extras, ...).

    Attributes:
        group_id: Catalog identifier.
        name: Group name, used as the key of a cart line's selections.
        kind: Single-choice or multi-choice.
        options: Options in display order.
    """

    group_id: int
    name: str
    kind: SelectionKind
    options: tuple[ModifierOption, ...] = field(default_factory=tuple)

    @property
    def labels(self) -> frozenset[str]:
        return frozenset(option.label for option in self.options)
