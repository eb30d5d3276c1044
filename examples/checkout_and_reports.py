"""Example: checkout and sales reports

This example opens (or creates) a database under data/, installs the
reference menu, rings up two orders and prints the reports for today.

Prerequisites:
- Optionally set POS_DB_PATH / POS_TAX_RATE (see pos_engine.config)
"""

from pos_engine import DateRange, EngineConfig
from pos_engine.api import (
    PosEngine,
    bottom_products,
    commit_order,
    daily_sales,
    list_sales,
    top_products,
)
from pos_engine.orders import CartLine
from pos_engine.reports import sales_summary

config = EngineConfig.from_env()
engine = PosEngine.open(config, seed=True)

# Build carts from catalog snapshots - MODIFY AS NEEDED
hamburguesa = engine.catalog.get_product(1)
coca_cola = engine.catalog.get_product(7)

cart = [
    CartLine.from_product(
        hamburguesa,
        quantity=2,
        modifiers={"Tamaño": "Grande", "Extras": ["Queso Extra +$15"]},
    ),
    CartLine.from_product(coca_cola, quantity=2),
]

order = commit_order(engine, cart, payment_method="efectivo", operator_id="admin")
print(f"Committed {order.order_number}: subtotal ${order.subtotal} + IVA ${order.tax} = ${order.total}")

order = commit_order(engine, [CartLine.from_product(coca_cola)], "tarjeta", "admin")
print(f"Committed {order.order_number}: ${order.total}")

today = DateRange.preset("today")

summary = sales_summary(list_sales(engine, today))
print(f"\nVentas de hoy: ${summary.total_sales} en {summary.order_count} ordenes")
print(f"Ticket promedio: ${summary.average_ticket}")

print("\nTop 3 (today):")
print(top_products(engine, today))

print("\nBottom 3 (today, zero sales included):")
print(bottom_products(engine, today))

print("\nDaily series (all history):")
print(daily_sales(engine))
