"""Sales analytics for a store's dashboard.

Computed on demand from the store's placed orders and never persisted.
Cancelled orders are left out of every figure.
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import date

from protean.utils.globals import current_domain

from storefront.order.order import Order, OrderStatus
from storefront.product.product import Product

TOP_PRODUCTS_LIMIT = 5

# Short month names as the es-ES locale renders them, kept here so labels do
# not depend on the locale of the process serving the request.
SPANISH_MONTHS = ("ene", "feb", "mar", "abr", "may", "jun", "jul", "ago", "sept", "oct", "nov", "dic")


@dataclass(frozen=True)
class DailySales:
    day: date
    label: str
    total: float


@dataclass(frozen=True)
class ProductSales:
    product_id: str
    name: str
    count: int


@dataclass(frozen=True)
class SalesSummary:
    total_revenue: float
    sales_count: int
    average_order_value: float
    daily_series: list[DailySales]
    top_products: list[ProductSales]


def day_label(day: date) -> str:
    """Day and short month, e.g. ``05 mar``."""
    return f"{day.day:02d} {SPANISH_MONTHS[day.month - 1]}"


def daily_series(orders) -> list[DailySales]:
    """Order totals summed per calendar day of creation, oldest day first."""
    totals = defaultdict(float)
    for order in orders:
        totals[order.created_at.date()] += order.total or 0.0

    return [DailySales(day=day, label=day_label(day), total=round(totals[day], 2)) for day in sorted(totals)]


def top_products(orders, product_names, limit=TOP_PRODUCTS_LIMIT) -> list[ProductSales]:
    """Best sellers by units sold.

    Ties keep the order in which products were first encountered while walking
    ``orders``. Products missing from ``product_names`` (deleted since) are left
    out.
    """
    quantities = {}
    for order in orders:
        for item in order.items:
            product_id = str(item.product_id)
            quantities[product_id] = quantities.get(product_id, 0) + item.quantity

    ranked = [
        ProductSales(product_id=product_id, name=product_names[product_id], count=count)
        for product_id, count in quantities.items()
        if product_id in product_names
    ]
    ranked.sort(key=lambda entry: entry.count, reverse=True)
    return ranked[:limit]


def summarize_sales(orders, product_names) -> SalesSummary:
    """Aggregate ``orders`` into the dashboard figures.

    ``product_names`` maps product id to display name for top-seller labels.
    """
    counted = sorted(
        (order for order in orders if order.status != OrderStatus.CANCELLED.value),
        key=lambda order: order.created_at,
    )

    total_revenue = round(sum(order.total or 0.0 for order in counted), 2)
    sales_count = len(counted)
    average_order_value = total_revenue / sales_count if sales_count else 0.0

    return SalesSummary(
        total_revenue=total_revenue,
        sales_count=sales_count,
        average_order_value=average_order_value,
        daily_series=daily_series(counted),
        top_products=top_products(counted, product_names),
    )


def sales_summary_for_store(store_id) -> SalesSummary:
    orders = current_domain.repository_for(Order).for_store(store_id)
    product_names = {
        str(product.id): product.name for product in current_domain.repository_for(Product).for_store(store_id)
    }
    return summarize_sales(orders, product_names)
