"""Tests for modifier selection handling.

Selections are a tagged mapping (group name -> set of option labels)
validated against modifier-group cardinality at commit time.
"""

import json

import pytest

from pos_engine.catalog import ModifierGroup, ModifierOption, SelectionKind
from pos_engine.exceptions import InvalidCartError
from pos_engine.orders.modifiers import validate_selections
from pos_engine.orders.types import dump_selections, load_selections, normalize_selections
from tests.test_utils import line


@pytest.fixture
def groups() -> dict[str, ModifierGroup]:
    size = ModifierGroup(
        group_id=1,
        name="Size",
        kind=SelectionKind.SINGLE,
        options=(ModifierOption("Small"), ModifierOption("Large")),
    )
    extras = ModifierGroup(
        group_id=2,
        name="Extras",
        kind=SelectionKind.MULTI,
        options=(ModifierOption("Cheese"), ModifierOption("Bacon"), ModifierOption("Avocado")),
    )
    return {g.name: g for g in (size, extras)}


class TestValidateSelections:
    def test_valid_single_and_multi_choice(self, groups: dict[str, ModifierGroup]) -> None:
        cart = [line(modifiers={"Size": ["Large"], "Extras": ["Cheese", "Bacon"]})]

        validate_selections(cart, groups)

    def test_no_selections_is_valid(self, groups: dict[str, ModifierGroup]) -> None:
        validate_selections([line()], groups)

    def test_single_choice_rejects_two_options(self, groups: dict[str, ModifierGroup]) -> None:
        cart = [line(modifiers={"Size": ["Small", "Large"]})]

        with pytest.raises(InvalidCartError, match="single-choice"):
            validate_selections(cart, groups)

    def test_unknown_group(self, groups: dict[str, ModifierGroup]) -> None:
        cart = [line(modifiers={"Sauce": ["BBQ"]})]

        with pytest.raises(InvalidCartError, match="unknown modifier group 'Sauce'"):
            validate_selections(cart, groups)

    def test_unknown_option(self, groups: dict[str, ModifierGroup]) -> None:
        cart = [line(modifiers={"Extras": ["Cheese", "Truffle"]})]

        with pytest.raises(InvalidCartError, match="Truffle"):
            validate_selections(cart, groups)


class TestSelectionEncoding:
    def test_string_is_one_option_not_characters(self) -> None:
        assert normalize_selections({"Size": "Large"}) == {"Size": frozenset({"Large"})}

    def test_empty_groups_are_dropped(self) -> None:
        assert normalize_selections({"Extras": [], "Size": ["Small"]}) == {
            "Size": frozenset({"Small"})
        }

    def test_dump_is_canonical(self) -> None:
        a = dump_selections({"Extras": frozenset({"Bacon", "Cheese"}), "Size": frozenset({"Large"})})
        b = dump_selections({"Size": frozenset({"Large"}), "Extras": frozenset({"Cheese", "Bacon"})})

        assert a == b
        assert json.loads(a) == {"Extras": ["Bacon", "Cheese"], "Size": ["Large"]}

    def test_load_handles_empty_text(self) -> None:
        assert load_selections("") == {}
        assert load_selections("{}") == {}

    def test_radio_and_checkbox_aliases(self) -> None:
        assert SelectionKind.parse("radio") is SelectionKind.SINGLE
        assert SelectionKind.parse("checkbox") is SelectionKind.MULTI
        assert SelectionKind.parse("multi-choice") is SelectionKind.MULTI
