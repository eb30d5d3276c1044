"""Read access to the product and modifier catalog.

The catalog is owned outside the order engine; this store only reads it,
plus a seed routine that installs the reference menu into an empty database.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from collections.abc import Iterable
from decimal import Decimal
from typing import TYPE_CHECKING

from pos_engine.catalog.types import ModifierGroup, ModifierOption, Product, SelectionKind
from pos_engine.exceptions import NotFoundError, PersistenceError

if TYPE_CHECKING:
    from pos_engine.db import Database

logger = logging.getLogger(__name__)

DEFAULT_PRODUCTS: list[tuple[str, str, str]] = [
    ("Hamburguesa Clásica", "Comida", "85.00"),
    ("Pizza Pepperoni", "Comida", "120.00"),
    ("Tacos al Pastor (3 pzas)", "Comida", "45.00"),
    ("Ensalada César", "Comida", "65.00"),
    ("Hot Dog", "Comida", "40.00"),
    ("Alitas BBQ (10 pzas)", "Comida", "95.00"),
    ("Coca-Cola", "Bebida", "25.00"),
    ("Agua Mineral", "Bebida", "20.00"),
    ("Limonada Natural", "Bebida", "30.00"),
    ("Cerveza", "Bebida", "45.00"),
    ("Café Americano", "Bebida", "35.00"),
    ("Pastel de Chocolate", "Postre", "55.00"),
    ("Helado", "Postre", "40.00"),
    ("Cheesecake", "Postre", "60.00"),
]

DEFAULT_MODIFIER_GROUPS: list[tuple[str, str, list[str]]] = [
    ("Tamaño", "radio", ["Chico", "Mediano", "Grande"]),
    ("Extras", "checkbox", ["Queso Extra +$15", "Aguacate +$20", "Tocino +$25", "Jalapeños +$10"]),
    ("Término", "radio", ["Poco Cocido", "Término Medio", "Bien Cocido"]),
    ("Sin", "checkbox", ["Sin Cebolla", "Sin Tomate", "Sin Lechuga", "Sin Mayonesa"]),
]


def _row_to_product(row: sqlite3.Row) -> Product:
    return Product(
        product_id=row["id"],
        name=row["name"],
        category=row["category"],
        price=Decimal(row["price"]),
        available=bool(row["available"]),
    )


def _row_to_group(row: sqlite3.Row) -> ModifierGroup:
    options = tuple(
        ModifierOption(label=o["label"], price_delta=Decimal(o.get("price_delta", "0")))
        for o in json.loads(row["options"])
    )
    return ModifierGroup(
        group_id=row["id"],
        name=row["name"],
        kind=SelectionKind.parse(row["kind"]),
        options=options,
    )


class CatalogStore:
    """Read-only view of products and modifier groups.

    Example:
        >>> catalog = CatalogStore(db)
        >>> [p.name for p in catalog.list_products()][:2]
        ['Agua Mineral', 'Café Americano']

    """

    def __init__(self, db: Database) -> None:
        self.db = db

    def list_products(self, available_only: bool = True) -> list[Product]:
        """List products ordered by category, then name."""
        query = "SELECT * FROM products"
        if available_only:
            query += " WHERE available = 1"
        query += " ORDER BY category, name"
        try:
            with self.db.transaction() as conn:
                rows = conn.execute(query).fetchall()
        except sqlite3.Error as e:
            raise PersistenceError(f"Could not read products: {e}") from e
        return [_row_to_product(r) for r in rows]

    def get_product(self, product_id: int) -> Product:
        """Return one product by identifier.

        Raises:
            NotFoundError: If no product has that identifier.

        """
        try:
            with self.db.transaction() as conn:
                row = conn.execute("SELECT * FROM products WHERE id = ?", (product_id,)).fetchone()
        except sqlite3.Error as e:
            raise PersistenceError(f"Could not read product {product_id}: {e}") from e
        if row is None:
            raise NotFoundError(f"Product {product_id} not found")
        return _row_to_product(row)

    def list_modifier_groups(self) -> dict[str, ModifierGroup]:
        """Return modifier groups keyed by name."""
        try:
            with self.db.transaction() as conn:
                rows = conn.execute("SELECT * FROM modifier_groups ORDER BY id").fetchall()
        except sqlite3.Error as e:
            raise PersistenceError(f"Could not read modifier groups: {e}") from e
        groups = [_row_to_group(r) for r in rows]
        return {g.name: g for g in groups}


def seed_catalog(
    db: Database,
    products: Iterable[tuple[str, str, str]] | None = None,
    modifier_groups: Iterable[tuple[str, str, list[str]]] | None = None,
) -> bool:
    """Install products and modifier groups into an empty catalog.

    Does nothing when the products table already has rows.

    Args:
        db: Database with the schema already created.
        products: (name, category, price) tuples. Defaults to the reference menu.
        modifier_groups: (name, kind, option labels) tuples. Defaults to the
            reference groups. ``kind`` accepts "radio"/"checkbox" aliases.

    Returns:
        True if the catalog was seeded, False if it already had products.

    """
    products = DEFAULT_PRODUCTS if products is None else list(products)
    modifier_groups = DEFAULT_MODIFIER_GROUPS if modifier_groups is None else list(modifier_groups)

    try:
        with db.transaction(write=True) as conn:
            count = conn.execute("SELECT COUNT(*) FROM products").fetchone()[0]
            if count:
                logger.debug("Catalog already has %d products, skipping seed", count)
                return False

            conn.executemany(
                "INSERT INTO products (name, category, price) VALUES (?, ?, ?)",
                [(name, category, str(Decimal(price))) for name, category, price in products],
            )
            conn.executemany(
                "INSERT OR IGNORE INTO modifier_groups (name, kind, options) VALUES (?, ?, ?)",
                [
                    (
                        name,
                        SelectionKind.parse(kind).value,
                        json.dumps([{"label": label, "price_delta": "0"} for label in labels]),
                    )
                    for name, kind, labels in modifier_groups
                ],
            )
    except sqlite3.Error as e:
        raise PersistenceError(f"Could not seed catalog: {e}") from e

    logger.info(
        "Seeded catalog with %d products and %d modifier groups",
        len(products),
        len(modifier_groups),
    )
    return True
