"""Public API for the POS order engine.

This module exposes the engine's operation surface as plain functions that
take an explicit ``PosEngine`` handle. A hosting layer (desktop UI, HTTP
service, CLI) calls these and chooses its own transport.

Example:
    >>> from pos_engine import EngineConfig
    >>> from pos_engine.api import PosEngine, commit_order, top_products
    >>> from pos_engine.orders import CartLine
    >>>
    >>> engine = PosEngine.open(EngineConfig.from_root("data"), seed=True)
    >>> burger = engine.catalog.get_product(1)
    >>> order = commit_order(engine, [CartLine.from_product(burger, quantity=2)], "cash", "cajero")
    >>> order.total
    Decimal('197.20')
    >>> top_products(engine, limit=1)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime

import pandas as pd

from pos_engine.catalog.store import CatalogStore, seed_catalog
from pos_engine.config import EngineConfig
from pos_engine.dates import DateRange
from pos_engine.db import Database
from pos_engine.orders.repository import OrderRepository
from pos_engine.orders.types import CartLine, Order
from pos_engine.reports import aggregate
from pos_engine.reports import sales as sales_reports

logger = logging.getLogger(__name__)


@dataclass
class PosEngine:
    """Explicit handle bundling the database, catalog and order repository."""

    config: EngineConfig
    db: Database
    catalog: CatalogStore
    orders: OrderRepository

    @classmethod
    def open(
        cls,
        config: EngineConfig,
        *,
        seed: bool = False,
        clock: Callable[[], datetime] | None = None,
    ) -> PosEngine:
        """Create the schema if needed and return a ready engine.

        Args:
            config: Engine configuration.
            seed: If True, install the reference menu into an empty catalog.
            clock: Override for the order timestamp source.

        Raises:
            PersistenceError: If the database cannot be initialised.

        """
        config.ensure_dirs()
        db = Database(config.db_path, timeout=config.timeout)
        db.init_schema()
        if seed:
            seed_catalog(db)

        logger.info("Opened POS engine at %s (tax rate %s)", config.db_path, config.tax_rate)
        return cls(
            config=config,
            db=db,
            catalog=CatalogStore(db),
            orders=OrderRepository(
                db,
                tax_rate=config.tax_rate,
                max_retries=config.max_commit_retries,
                clock=clock,
            ),
        )


def commit_order(
    engine: PosEngine,
    lines: Iterable[CartLine],
    payment_method: str,
    operator_id: str,
) -> Order:
    """Commit a cart as an order.

    Modifier selections are validated against the catalog's modifier groups.

    Raises:
        InvalidCartError: If the cart, a modifier selection or the payment
            method is invalid.
        PersistenceError: If the order could not be stored.

    """
    groups = engine.catalog.list_modifier_groups()
    return engine.orders.commit(lines, payment_method, operator_id, modifier_groups=groups)


def get_order(engine: PosEngine, order_id: int) -> Order:
    """Return one committed order (NotFoundError if it does not exist)."""
    return engine.orders.get(order_id)


def list_sales(engine: PosEngine, date_range: DateRange | None = None) -> list[Order]:
    """Orders in the range with expanded lines, newest first."""
    return sales_reports.list_sales(engine.orders, date_range)


def top_products(
    engine: PosEngine,
    date_range: DateRange | None = None,
    limit: int = aggregate.DEFAULT_LIMIT,
) -> pd.DataFrame:
    """Best sellers among products sold in the range."""
    return aggregate.top_products(engine.orders, date_range, limit)


def bottom_products(
    engine: PosEngine,
    date_range: DateRange | None = None,
    limit: int = aggregate.DEFAULT_LIMIT,
) -> pd.DataFrame:
    """Worst sellers among all available products, zero sales included."""
    return aggregate.bottom_products(engine.orders, engine.catalog, date_range, limit)


def daily_sales(engine: PosEngine, date_range: DateRange | None = None) -> pd.DataFrame:
    """Order count and sales total per calendar date."""
    return aggregate.daily_sales(engine.orders, date_range)
