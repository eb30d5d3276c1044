"""Reports domain module.

Read-only reports over the committed order history. All reports accept the
same optional DateRange (inclusive, day granularity):

- **list_sales**: orders with expanded lines, newest first.
- **sales_summary**: total sales, order count and average ticket.
- **top_products** / **bottom_products**: product rankings by units sold.
- **daily_sales**: order count and total per calendar date (sparse).

Example:
    >>> from pos_engine.reports import DateRange, top_products
    >>> df = top_products(repo, DateRange.preset("week"), limit=5)
"""

from pos_engine.dates import DateRange
from pos_engine.reports.aggregate import bottom_products, daily_sales, top_products
from pos_engine.reports.sales import SalesSummary, list_sales, sales_summary

__all__ = [
    "DateRange",
    "SalesSummary",
    "bottom_products",
    "daily_sales",
    "list_sales",
    "sales_summary",
    "top_products",
]
