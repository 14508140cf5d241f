"""Order placement — command and handler.

Storefront visitors are unauthenticated, so nothing they send about money is
trusted: the handler re-reads every referenced product, scoped to the store
the order is for, and prices the order from those records. Any ``total`` or
``price`` the client supplied never reaches this command.
"""

import json

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import MAX_ITEM_QUANTITY, Order
from storefront.product.product import Product
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class PlaceOrder:
    store_id: Identifier(required=True)
    customer_name: String(required=True, max_length=255)
    customer_email: String(required=True, max_length=254)
    customer_phone: String(max_length=50)
    notes: Text()
    items: Text(required=True)  # JSON: [{"product_id": ..., "quantity": ...}]


def parse_order_lines(raw_items):
    """Decode and validate the requested ``(product_id, quantity)`` pairs."""
    items = json.loads(raw_items) if isinstance(raw_items, str) else raw_items
    if not items or not isinstance(items, list):
        raise ValidationError({"items": ["El pedido debe incluir al menos un producto"]})

    lines = []
    for item in items:
        product_id = item.get("product_id") if isinstance(item, dict) else None
        quantity = item.get("quantity") if isinstance(item, dict) else None
        if not product_id:
            raise ValidationError({"items": ["Cada producto del pedido necesita un identificador"]})
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValidationError({"items": ["La cantidad debe ser un número entero positivo"]})
        if quantity > MAX_ITEM_QUANTITY:
            raise ValidationError({"items": [f"La cantidad máxima por producto es {MAX_ITEM_QUANTITY}"]})
        lines.append((str(product_id), quantity))
    return lines


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        requested = parse_order_lines(command.items)

        found = current_domain.repository_for(Product).find_many_in_store(
            command.store_id, [product_id for product_id, _ in requested]
        )
        products = {str(product.id): product for product in found}

        if len(products) != len({product_id for product_id, _ in requested}):
            logger.warning(
                "order_rejected_unknown_products",
                store_id=str(command.store_id),
                requested=len(requested),
                found=len(products),
            )
            raise ObjectNotFoundError("Alguno de los productos no fue encontrado o no pertenece a esta tienda.")

        order = Order.place(
            store_id=command.store_id,
            customer_name=command.customer_name,
            customer_email=command.customer_email,
            customer_phone=command.customer_phone,
            notes=command.notes,
            lines=[(products[product_id], quantity) for product_id, quantity in requested],
        )
        current_domain.repository_for(Order).add(order)
        logger.info("order_placed", order_id=str(order.id), store_id=str(command.store_id), total=order.total)
        return str(order.id)
