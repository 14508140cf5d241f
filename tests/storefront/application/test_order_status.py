"""Application tests for order status updates."""

import json

import pytest
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain
from storefront.order.order import Order
from storefront.order.placement import PlaceOrder
from storefront.order.status import UpdateOrderStatus
from storefront.product.management import AddProduct


def _place_order(store_id="store-1"):
    product_id = current_domain.process(
        AddProduct(store_id=store_id, name="Torta", price=10.0), asynchronous=False
    )
    return current_domain.process(
        PlaceOrder(
            store_id=store_id,
            customer_name="Luis",
            customer_email="luis@example.com",
            items=json.dumps([{"product_id": product_id, "quantity": 1}]),
        ),
        asynchronous=False,
    )


def _update(order_id, status, store_id="store-1"):
    current_domain.process(UpdateOrderStatus(store_id=store_id, order_id=order_id, status=status), asynchronous=False)


class TestUpdateOrderStatusHandler:
    def test_update(self):
        order_id = _place_order()

        _update(order_id, "CONFIRMED")

        assert current_domain.repository_for(Order).get(order_id).status == "CONFIRMED"

    def test_cancelled_order_can_be_confirmed(self):
        order_id = _place_order()
        _update(order_id, "CANCELLED")

        _update(order_id, "CONFIRMED")

        assert current_domain.repository_for(Order).get(order_id).status == "CONFIRMED"

    def test_invalid_status(self):
        order_id = _place_order()

        with pytest.raises(ValidationError):
            _update(order_id, "SHIPPED")

        assert current_domain.repository_for(Order).get(order_id).status == "PENDING"

    def test_nonexistent_order(self):
        with pytest.raises(ObjectNotFoundError):
            _update("no-such-order", "CONFIRMED")

    def test_foreign_order_looks_like_nonexistent(self):
        order_id = _place_order(store_id="store-2")

        with pytest.raises(ObjectNotFoundError):
            _update(order_id, "CONFIRMED", store_id="store-1")

        assert current_domain.repository_for(Order).get(order_id).status == "PENDING"

    def test_invalid_status_on_foreign_order_is_not_found(self):
        order_id = _place_order(store_id="store-2")

        with pytest.raises(ObjectNotFoundError):
            _update(order_id, "SHIPPED", store_id="store-1")

    def test_items_survive_status_change(self):
        order_id = _place_order()

        _update(order_id, "DELIVERED")

        order = current_domain.repository_for(Order).get(order_id)
        assert len(order.items) == 1
        assert order.total == 10.0
