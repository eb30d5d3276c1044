"""POS Engine - point-of-sale order commit and sales analytics.

This package turns carts into durable, immutable orders and answers
analytical queries over the order history:

- **Orders**: pricing, modifier validation and atomic order commit
- **Reports**: sales listing, top/bottom sellers and daily aggregates
- **Catalog**: read access to products and modifier groups

Module Structure:
    pos_engine.api: Operation surface (commit_order, list_sales, top_products, ...)
    pos_engine.orders: Cart/order model, pricing and the order repository
    pos_engine.reports: Date-filtered reports built with pandas
    pos_engine.catalog: Product and modifier-group store
    pos_engine.config: EngineConfig configuration

Quick Start:
    >>> from pos_engine import EngineConfig
    >>> from pos_engine.api import PosEngine, commit_order, daily_sales
    >>> from pos_engine.orders import CartLine
    >>> from pos_engine.reports import DateRange
    >>>
    >>> engine = PosEngine.open(EngineConfig.from_root("data"), seed=True)
    >>> product = engine.catalog.list_products()[0]
    >>> order = commit_order(engine, [CartLine.from_product(product)], "cash", "cajero")
    >>> daily_sales(engine, DateRange.preset("month"))
"""

__version__ = "0.1.0"

from pos_engine.config import EngineConfig
from pos_engine.dates import DateRange
from pos_engine.exceptions import (
    ConfigError,
    InvalidCartError,
    InvalidRangeError,
    NotFoundError,
    PersistenceError,
    PosEngineError,
)

__all__ = [
    "ConfigError",
    "DateRange",
    "EngineConfig",
    "InvalidCartError",
    "InvalidRangeError",
    "NotFoundError",
    "PersistenceError",
    "PosEngineError",
    "__version__",
]
