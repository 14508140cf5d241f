"""Order aggregate with its OrderItem entity.

An Order is priced once, when it is placed: every item freezes the unit price
of its product at that moment and the order total is derived from those
frozen prices. Later catalogue price changes never reach placed orders.

Status is a flat set with no transition graph; the store owner may move an
order from any status to any other, including out of Cancelled.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text

from storefront.domain import storefront
from storefront.order.events import OrderPlaced, OrderStatusChanged
from storefront.utils.query import fetch_all


class OrderStatus(Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


ORDER_STATUSES = frozenset(status.value for status in OrderStatus)

MAX_ITEM_QUANTITY = 10_000


def order_total(items):
    """Sum of price x quantity over ``items``, rounded to cents."""
    return round(sum(item.price * item.quantity for item in items), 2)


@storefront.entity(part_of="Order")
class OrderItem:
    """A line of an order: one product, a quantity, and the price paid per unit.

    ``price`` is the product's price when the order was placed. The Order
    offers no way to change it afterwards.
    """

    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1, max_value=MAX_ITEM_QUANTITY)
    price = Float(required=True, min_value=0.0)


@storefront.aggregate
class Order:
    store_id = Identifier(required=True)
    customer_name = String(required=True, max_length=255)
    customer_email = String(required=True, max_length=254)
    customer_phone = String(max_length=50)
    notes = Text()
    total = Float(default=0.0)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    items = HasMany(OrderItem)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_must_match_item_prices(self):
        if not self.items:
            return
        if round(self.total or 0.0, 2) != order_total(self.items):
            raise ValidationError({"total": ["El total no coincide con los productos del pedido"]})

    @classmethod
    def place(cls, store_id, customer_name, customer_email, lines, customer_phone=None, notes=None):
        """Create an order from ``lines``, a list of ``(product, quantity)`` pairs.

        Each product must already be known to belong to ``store_id``; its
        current price is what the item captures.
        """
        if not lines:
            raise ValidationError({"items": ["El pedido debe incluir al menos un producto"]})

        now = datetime.now(UTC)
        order = cls(
            store_id=store_id,
            customer_name=customer_name,
            customer_email=customer_email,
            customer_phone=customer_phone or None,
            notes=notes or None,
            created_at=now,
            updated_at=now,
        )

        with atomic_change(order):
            for product, quantity in lines:
                order.add_items(
                    OrderItem(
                        product_id=str(product.id),
                        quantity=quantity,
                        price=product.price,
                    )
                )
            order.total = order_total(order.items)

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                store_id=str(store_id),
                customer_email=customer_email,
                items=json.dumps(
                    [
                        {"product_id": str(item.product_id), "quantity": item.quantity, "price": item.price}
                        for item in order.items
                    ]
                ),
                item_count=len(order.items),
                total=order.total,
                placed_at=now,
            )
        )
        return order

    def change_status(self, new_status):
        if new_status not in ORDER_STATUSES:
            raise ValidationError({"status": ["Estado inválido"]})

        previous_status = self.status
        self.status = new_status
        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                store_id=str(self.store_id),
                previous_status=previous_status,
                new_status=new_status,
                changed_at=now,
            )
        )


@storefront.repository(part_of=Order)
class OrderRepository:
    """Every lookup is scoped by ``store_id``; there is no unscoped finder."""

    def find_in_store(self, store_id, order_id) -> Order | None:
        matches = self._dao.query.filter(id=str(order_id), store_id=str(store_id)).all().items
        return matches[0] if matches else None

    def for_store(self, store_id) -> list[Order]:
        """All orders of a store, newest first."""
        orders = fetch_all(self._dao.query.filter(store_id=str(store_id)))
        return sorted(orders, key=lambda o: o.created_at, reverse=True)
