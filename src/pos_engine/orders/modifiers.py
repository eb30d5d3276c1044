"""Validation of cart modifier selections against modifier groups."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from pos_engine.catalog.types import ModifierGroup, SelectionKind
from pos_engine.exceptions import InvalidCartError
from pos_engine.orders.types import CartLine


def validate_selections(lines: Sequence[CartLine], groups: Mapping[str, ModifierGroup]) -> None:
    """Reject selections that do not fit their modifier group.

    Args:
        lines: Cart lines to check.
        groups: Modifier groups keyed by name.

    Raises:
        InvalidCartError: If a line names an unknown group or option, or picks
            more than one option in a single-choice group.

    """
    for position, line in enumerate(lines, start=1):
        for group_name, selected in line.modifiers.items():
            group = groups.get(group_name)
            if group is None:
                raise InvalidCartError(
                    f"Line {position} ({line.product_name}): unknown modifier group {group_name!r}"
                )

            unknown = sorted(selected - group.labels)
            if unknown:
                raise InvalidCartError(
                    f"Line {position} ({line.product_name}): {group_name!r} has no option(s) "
                    f"{unknown}"
                )

            if group.kind is SelectionKind.SINGLE and len(selected) > 1:
                raise InvalidCartError(
                    f"Line {position} ({line.product_name}): {group_name!r} is single-choice, "
                    f"got {sorted(selected)}"
                )
