"""Domain events for the Product aggregate."""

from protean.fields import Boolean, DateTime, Float, Identifier, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductAdded:
    """A merchant added a product to their store's catalogue."""

    __version__ = 1

    product_id: Identifier(required=True)
    store_id: Identifier(required=True)
    name: String(required=True)
    price: Float(required=True)
    created_at: DateTime(required=True)


@storefront.event(part_of="Product")
class ProductUpdated:
    """A product's details, price or visibility were edited.

    Orders already placed keep the price they captured at purchase time;
    ``previous_price`` is carried for downstream consumers only.
    """

    __version__ = 1

    product_id: Identifier(required=True)
    store_id: Identifier(required=True)
    name: String(required=True)
    previous_price: Float(required=True)
    price: Float(required=True)
    is_active: Boolean(required=True)
    updated_at: DateTime(required=True)


@storefront.event(part_of="Product")
class ProductRemoved:
    """A merchant removed a product from their catalogue."""

    __version__ = 1

    product_id: Identifier(required=True)
    store_id: Identifier(required=True)
    removed_at: DateTime(required=True)
