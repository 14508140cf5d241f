"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """A storefront visitor placed an order; the total was priced server-side."""

    __version__ = 1

    order_id: Identifier(required=True)
    store_id: Identifier(required=True)
    customer_email: String(required=True)
    items: Text(required=True)  # JSON: [{product_id, quantity, price}]
    item_count: Integer(required=True)
    total: Float(required=True)
    placed_at: DateTime(required=True)


@storefront.event(part_of="Order")
class OrderStatusChanged:
    """The store owner moved an order to a different status."""

    __version__ = 1

    order_id: Identifier(required=True)
    store_id: Identifier(required=True)
    previous_status: String(required=True)
    new_status: String(required=True)
    changed_at: DateTime(required=True)
