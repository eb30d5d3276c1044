"""Product rankings and daily aggregates over the order history.

Builds three report tables from the committed order-line fact:

- **top_products**: best sellers among products sold in the range.
- **bottom_products**: worst sellers among *all available* catalog products,
  including those with no sales at all (zero filled).
- **daily_sales**: one row per calendar date with at least one order.

Top rankings cover sold products only (inner join); bottom rankings cover
the whole available catalog (outer join), so products nobody buys show up
with zero sales.

Ranking ties on ``total_quantity`` are broken by ``product_id`` ascending.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pandas as pd

from pos_engine.dates import DateRange

if TYPE_CHECKING:
    from pos_engine.catalog.store import CatalogStore
    from pos_engine.orders.repository import OrderRepository

logger = logging.getLogger(__name__)

RANKING_COLUMNS = ["product_id", "name", "category", "total_quantity", "total_revenue"]
DAILY_COLUMNS = ["date", "order_count", "total_sales"]
DEFAULT_LIMIT = 3


def _validate_limit(limit: int) -> None:
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise ValueError(f"Invalid limit {limit!r}. Must be a positive integer.")


def _empty_ranking() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "product_id": pd.Series(dtype="int64"),
            "name": pd.Series(dtype="object"),
            "category": pd.Series(dtype="object"),
            "total_quantity": pd.Series(dtype="int64"),
            "total_revenue": pd.Series(dtype="float64"),
        }
    )


def aggregate_by_product(lines: pd.DataFrame) -> pd.DataFrame:
    """Aggregate order lines into one row per product.

    Args:
        lines: Order-line fact (see OrderRepository.load_lines_frame).

    Returns:
        DataFrame with RANKING_COLUMNS, one row per product sold. Name and
        category come from the most recent line of each product.

    """
    if lines.empty:
        return _empty_ranking()

    df = lines.assign(revenue=lines["quantity"] * lines["unit_price"])
    result = (
        df.groupby("product_id", sort=True)
        .agg(
            name=("product_name", "last"),
            category=("category", "last"),
            total_quantity=("quantity", "sum"),
            total_revenue=("revenue", "sum"),
        )
        .reset_index()
    )
    result["product_id"] = result["product_id"].astype("int64")
    result["total_quantity"] = result["total_quantity"].astype("int64")
    result["total_revenue"] = result["total_revenue"].astype(float).round(2)
    return result[RANKING_COLUMNS]


def _rank(df: pd.DataFrame, ascending: bool, limit: int) -> pd.DataFrame:
    ranked = df.sort_values(
        ["total_quantity", "product_id"],
        ascending=[ascending, True],
        kind="mergesort",
    )
    return ranked.head(limit).reset_index(drop=True)


def top_products(
    repo: OrderRepository,
    date_range: DateRange | None = None,
    limit: int = DEFAULT_LIMIT,
) -> pd.DataFrame:
    """Best-selling products in the range, by units sold.

    Only products with at least one line in the range appear.

    Args:
        repo: Order repository to read from.
        date_range: Inclusive day-granularity filter; None means all history.
        limit: Number of rows to return (default: 3).

    Returns:
        DataFrame with columns product_id, name, category, total_quantity,
        total_revenue; sorted by total_quantity descending.

    Raises:
        ValueError: If limit is not a positive integer.

    """
    _validate_limit(limit)
    date_range = date_range or DateRange()

    lines = repo.load_lines_frame(date_range)
    logger.info("Building top %d products for %s", limit, date_range.describe())
    return _rank(aggregate_by_product(lines), ascending=False, limit=limit)


def bottom_products(
    repo: OrderRepository,
    catalog: CatalogStore,
    date_range: DateRange | None = None,
    limit: int = DEFAULT_LIMIT,
) -> pd.DataFrame:
    """Worst-selling available products in the range, by units sold.

    Every available catalog product takes part; products without sales in
    the range get total_quantity 0 and total_revenue 0.0. Name and category
    come from the current catalog.

    Args:
        repo: Order repository to read from.
        catalog: Catalog store listing the available products.
        date_range: Inclusive day-granularity filter; None means all history.
        limit: Number of rows to return (default: 3).

    Returns:
        DataFrame with the same columns as top_products, sorted by
        total_quantity ascending.

    Raises:
        ValueError: If limit is not a positive integer.

    """
    _validate_limit(limit)
    date_range = date_range or DateRange()

    products = catalog.list_products(available_only=True)
    if not products:
        logger.info("No available products in catalog; bottom ranking is empty")
        return _empty_ranking()

    catalog_df = pd.DataFrame(
        {
            "product_id": pd.Series([p.product_id for p in products], dtype="int64"),
            "name": [p.name for p in products],
            "category": [p.category for p in products],
        }
    )
    sales = aggregate_by_product(repo.load_lines_frame(date_range))

    merged = catalog_df.merge(
        sales[["product_id", "total_quantity", "total_revenue"]],
        on="product_id",
        how="left",
    )
    merged["total_quantity"] = merged["total_quantity"].fillna(0).astype("int64")
    merged["total_revenue"] = merged["total_revenue"].fillna(0.0).astype(float).round(2)

    logger.info(
        "Building bottom %d of %d available products for %s",
        limit,
        len(catalog_df),
        date_range.describe(),
    )
    return _rank(merged[RANKING_COLUMNS], ascending=True, limit=limit)


def daily_sales(repo: OrderRepository, date_range: DateRange | None = None) -> pd.DataFrame:
    """Order count and sales total per calendar date.

    The series is sparse: dates without orders are absent, not zero filled.

    Args:
        repo: Order repository to read from.
        date_range: Inclusive day-granularity filter; None means all history.

    Returns:
        DataFrame with columns date (datetime.date), order_count, total_sales;
        ascending by date.

    """
    date_range = date_range or DateRange()
    orders = repo.load_orders_frame(date_range)
    logger.info("Building daily sales for %s (%d orders)", date_range.describe(), len(orders))

    if orders.empty:
        return pd.DataFrame(
            {
                "date": pd.Series(dtype="object"),
                "order_count": pd.Series(dtype="int64"),
                "total_sales": pd.Series(dtype="float64"),
            }
        )

    orders["date"] = orders["created_at"].dt.date
    daily = (
        orders.groupby("date", sort=True)
        .agg(order_count=("order_id", "count"), total_sales=("total", "sum"))
        .reset_index()
    )
    daily["order_count"] = daily["order_count"].astype("int64")
    daily["total_sales"] = daily["total_sales"].astype(float).round(2)
    return daily[DAILY_COLUMNS]
