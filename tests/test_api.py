"""End-to-end tests through the public API on the reference menu."""

import sqlite3
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path

import pytest

from pos_engine import EngineConfig
from pos_engine.api import (
    PosEngine,
    bottom_products,
    commit_order,
    daily_sales,
    get_order,
    list_sales,
    top_products,
)
from pos_engine.catalog import SelectionKind
from pos_engine.dates import DateRange
from pos_engine.exceptions import InvalidCartError, InvalidRangeError, NotFoundError
from pos_engine.orders import CartLine
from tests.test_utils import FixedClock, count_rows

HAMBURGUESA = 1
ENSALADA = 4
COCA_COLA = 7


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2025, 1, 15, 13, 45, 0))


@pytest.fixture
def engine(tmp_path: Path, clock: FixedClock) -> PosEngine:
    return PosEngine.open(EngineConfig.from_root(tmp_path), seed=True, clock=clock)


def cart_line(engine: PosEngine, product_id: int, quantity: int = 1, **modifiers: object) -> CartLine:
    product = engine.catalog.get_product(product_id)
    return CartLine.from_product(product, quantity=quantity, modifiers=modifiers)


class TestOpen:
    def test_creates_database_file(self, tmp_path: Path) -> None:
        config = EngineConfig.from_root(tmp_path / "nested" / "data")

        PosEngine.open(config)

        assert config.db_path.exists()

    def test_seed_installs_reference_menu(self, engine: PosEngine) -> None:
        products = engine.catalog.list_products()
        groups = engine.catalog.list_modifier_groups()

        assert len(products) == 14
        assert engine.catalog.get_product(HAMBURGUESA).name == "Hamburguesa Clásica"
        assert engine.catalog.get_product(HAMBURGUESA).price == Decimal("85.00")
        assert set(groups) == {"Tamaño", "Extras", "Término", "Sin"}
        assert groups["Tamaño"].kind is SelectionKind.SINGLE
        assert groups["Extras"].kind is SelectionKind.MULTI

    def test_seed_is_idempotent(self, tmp_path: Path) -> None:
        config = EngineConfig.from_root(tmp_path)
        PosEngine.open(config, seed=True)

        engine = PosEngine.open(config, seed=True)

        assert count_rows(engine, "products") == 14
        assert count_rows(engine, "modifier_groups") == 4

    def test_uses_wal_journal(self, engine: PosEngine) -> None:
        conn = sqlite3.connect(engine.config.db_path)
        try:
            assert conn.execute("PRAGMA journal_mode").fetchone()[0] == "wal"
        finally:
            conn.close()

    def test_missing_product(self, engine: PosEngine) -> None:
        with pytest.raises(NotFoundError, match="Product 999"):
            engine.catalog.get_product(999)


class TestCommitOrder:
    def test_checkout(self, engine: PosEngine) -> None:
        order = commit_order(engine, [cart_line(engine, HAMBURGUESA, 2)], "efectivo", "admin")

        assert order.order_number == "ORD-20250115-0001"
        assert order.subtotal == Decimal("170.00")
        assert order.tax == Decimal("27.20")
        assert order.total == Decimal("197.20")
        assert get_order(engine, order.order_id) == order

    def test_modifiers_validated_against_catalog(self, engine: PosEngine) -> None:
        line = cart_line(engine, HAMBURGUESA, **{"Tamaño": ["Chico", "Grande"]})

        with pytest.raises(InvalidCartError, match="single-choice"):
            commit_order(engine, [line], "efectivo", "admin")
        assert count_rows(engine, "orders") == 0

    def test_valid_modifiers_are_stored(self, engine: PosEngine) -> None:
        line = cart_line(
            engine,
            HAMBURGUESA,
            **{"Tamaño": "Grande", "Extras": ["Queso Extra +$15", "Tocino +$25"]},
        )

        order = commit_order(engine, [line], "tarjeta", "admin")

        assert get_order(engine, order.order_id).lines[0].modifiers == {
            "Tamaño": frozenset({"Grande"}),
            "Extras": frozenset({"Queso Extra +$15", "Tocino +$25"}),
        }

    def test_unknown_modifier_group(self, engine: PosEngine) -> None:
        line = cart_line(engine, HAMBURGUESA, Salsa=["BBQ"])

        with pytest.raises(InvalidCartError, match="unknown modifier group"):
            commit_order(engine, [line], "efectivo", "admin")

    def test_get_missing_order(self, engine: PosEngine) -> None:
        with pytest.raises(NotFoundError):
            get_order(engine, 1)


class TestReports:
    def test_reports_over_a_day_of_sales(self, engine: PosEngine, clock: FixedClock) -> None:
        commit_order(engine, [cart_line(engine, HAMBURGUESA, 2)], "efectivo", "admin")
        commit_order(
            engine,
            [cart_line(engine, COCA_COLA, 3), cart_line(engine, HAMBURGUESA)],
            "tarjeta",
            "admin",
        )
        clock.set(datetime(2025, 1, 16, 10, 0, 0))
        commit_order(engine, [cart_line(engine, ENSALADA)], "efectivo", "admin")

        day = DateRange(date(2025, 1, 15), date(2025, 1, 15))

        assert len(list_sales(engine, day)) == 2
        assert len(list_sales(engine)) == 3
        assert top_products(engine, day)["product_id"].tolist() == [HAMBURGUESA, COCA_COLA]

        bottom = bottom_products(engine, day)
        assert bottom["product_id"].tolist() == [2, 3, ENSALADA]
        assert bottom["total_quantity"].tolist() == [0, 0, 0]

        daily = daily_sales(engine)
        assert daily["date"].tolist() == [date(2025, 1, 15), date(2025, 1, 16)]
        assert daily["order_count"].tolist() == [2, 1]

    def test_empty_history(self, engine: PosEngine) -> None:
        assert list_sales(engine) == []
        assert top_products(engine).empty
        assert daily_sales(engine).empty
        assert len(bottom_products(engine, limit=20)) == 14

    def test_inverted_range_is_rejected(self) -> None:
        with pytest.raises(InvalidRangeError):
            DateRange(date(2025, 2, 1), date(2025, 1, 1))
