"""Catalog collaborator: products and modifier groups.

The order engine never writes the catalog. It reads product snapshots at
cart-build time and modifier groups at checkout to validate selections.
"""

from pos_engine.catalog.store import CatalogStore, seed_catalog
from pos_engine.catalog.types import ModifierGroup, ModifierOption, Product, SelectionKind

__all__ = [
    "CatalogStore",
    "ModifierGroup",
    "ModifierOption",
    "Product",
    "SelectionKind",
    "seed_catalog",
]
