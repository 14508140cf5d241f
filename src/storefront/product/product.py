"""Product aggregate — a catalogue entry owned by exactly one store."""

import math
from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, String, Text

from storefront.domain import storefront
from storefront.product.events import ProductAdded, ProductRemoved, ProductUpdated
from storefront.utils.query import fetch_all


def validate_price(price):
    """Return ``price`` as a two-decimal float.

    Negatives, non-numbers and non-finite floats (``inf``, ``nan``) are rejected.
    """
    if isinstance(price, bool) or not isinstance(price, int | float):
        raise ValidationError({"price": ["El precio debe ser un número positivo"]})
    try:
        value = float(price)
    except OverflowError:
        value = math.inf
    if not math.isfinite(value) or value < 0:
        raise ValidationError({"price": ["El precio debe ser un número positivo"]})
    return round(value, 2)


@storefront.aggregate
class Product:
    store_id: Identifier(required=True)
    name: String(required=True, max_length=255)
    description: Text()
    price: Float(required=True, min_value=0.0)
    image: String(max_length=1000)
    is_active: Boolean(default=True)
    is_removed: Boolean(default=False)
    removed_at: DateTime()
    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def create(cls, store_id, name, price, description=None, image=None):
        now = datetime.now(UTC)
        product = cls(
            store_id=store_id,
            name=name,
            price=validate_price(price),
            description=description or None,
            image=image or None,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductAdded(
                product_id=str(product.id),
                store_id=str(store_id),
                name=name,
                price=product.price,
                created_at=now,
            )
        )
        return product

    def update(self, name, price, description=None, image=None, is_active=None):
        """Replace name and price; optional fields left as ``None`` stay unchanged."""
        previous_price = self.price

        self.name = name
        self.price = validate_price(price)
        if description is not None:
            self.description = description
        if image is not None:
            self.image = image
        if is_active is not None:
            self.is_active = is_active

        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            ProductUpdated(
                product_id=str(self.id),
                store_id=str(self.store_id),
                name=self.name,
                previous_price=previous_price,
                price=self.price,
                is_active=self.is_active,
                updated_at=now,
            )
        )

    def remove(self):
        """Take the product out of the catalogue.

        The record is kept, flagged as removed; repository reads no longer return it.
        Orders that already captured it are unaffected.
        """
        now = datetime.now(UTC)
        self.is_removed = True
        self.removed_at = now
        self.updated_at = now

        self.raise_(ProductRemoved(product_id=str(self.id), store_id=str(self.store_id), removed_at=now))


@storefront.repository(part_of=Product)
class ProductRepository:
    """Every lookup is scoped by ``store_id``; there is no unscoped finder.

    Removed products are never returned.
    """

    def find_in_store(self, store_id, product_id) -> Product | None:
        matches = self._dao.query.filter(id=str(product_id), store_id=str(store_id), is_removed=False).all().items
        return matches[0] if matches else None

    def find_many_in_store(self, store_id, product_ids) -> list[Product]:
        """The store's products among ``product_ids``, fetched in a single read."""
        product_ids = list(dict.fromkeys(str(product_id) for product_id in product_ids))
        if not product_ids:
            return []
        queryset = self._dao.query.filter(id__in=product_ids, store_id=str(store_id), is_removed=False)
        return queryset.limit(len(product_ids)).all().items

    def for_store(self, store_id, active_only=False) -> list[Product]:
        filters = {"store_id": str(store_id), "is_removed": False}
        if active_only:
            filters["is_active"] = True
        products = fetch_all(self._dao.query.filter(**filters))
        return sorted(products, key=lambda p: p.created_at, reverse=True)
