"""Tests for the Order aggregate."""

import json

import pytest
from protean.exceptions import ValidationError
from storefront.order.events import OrderPlaced, OrderStatusChanged
from storefront.order.order import ORDER_STATUSES, Order, OrderItem, OrderStatus, order_total
from storefront.product.product import Product

STORE_ID = "store-1"


def _product(name="Torta", price=10.0):
    product = Product.create(store_id=STORE_ID, name=name, price=price)
    product._events.clear()
    return product


def _place(lines, **overrides):
    defaults = {
        "store_id": STORE_ID,
        "customer_name": "Luis Gómez",
        "customer_email": "luis@example.com",
        "lines": lines,
    }
    defaults.update(overrides)
    return Order.place(**defaults)


class TestOrderTotal:
    def test_sum_of_price_times_quantity(self):
        items = [OrderItem(product_id="a", quantity=2, price=10.0), OrderItem(product_id="b", quantity=1, price=5.0)]
        assert order_total(items) == 25.0

    def test_rounded_to_cents(self):
        items = [OrderItem(product_id="a", quantity=3, price=0.1)]
        assert order_total(items) == 0.3


class TestPlaceOrder:
    def test_total_from_product_prices(self):
        a = _product("A", 10.0)
        b = _product("B", 5.0)

        order = _place([(a, 2), (b, 1)])

        assert order.total == 25.0
        assert order.status == OrderStatus.PENDING.value
        assert len(order.items) == 2

    def test_items_capture_unit_price(self):
        a = _product("A", 12.5)

        order = _place([(a, 3)])

        item = order.items[0]
        assert item.product_id == str(a.id)
        assert item.quantity == 3
        assert item.price == 12.5

    def test_later_price_change_does_not_reach_order(self):
        a = _product("A", 10.0)
        order = _place([(a, 1)])

        a.update(name="A", price=99.0)

        assert order.items[0].price == 10.0
        assert order.total == 10.0

    def test_duplicate_lines_kept_separately(self):
        a = _product("A", 4.0)

        order = _place([(a, 1), (a, 2)])

        assert len(order.items) == 2
        assert order.total == 12.0

    def test_optional_fields_blank_become_none(self):
        order = _place([(_product(), 1)], customer_phone="", notes="")

        assert order.customer_phone is None
        assert order.notes is None

    def test_empty_lines_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _place([])
        assert "items" in exc.value.messages

    def test_customer_name_required(self):
        with pytest.raises(ValidationError):
            _place([(_product(), 1)], customer_name=None)

    def test_raises_order_placed(self):
        a = _product("A", 10.0)

        order = _place([(a, 2)])

        assert len(order._events) == 1
        event = order._events[0]
        assert isinstance(event, OrderPlaced)
        assert event.total == 20.0
        assert event.item_count == 1
        assert json.loads(event.items) == [{"product_id": str(a.id), "quantity": 2, "price": 10.0}]


class TestTotalInvariant:
    def test_total_cannot_drift_from_items(self):
        order = _place([(_product(price=10.0), 1)])

        with pytest.raises(ValidationError) as exc:
            order.total = 1.0
        assert "total" in exc.value.messages


class TestChangeStatus:
    def _order(self):
        order = _place([(_product(), 1)])
        order._events.clear()
        return order

    @pytest.mark.parametrize("status", sorted(ORDER_STATUSES))
    def test_any_status_accepted(self, status):
        order = self._order()

        order.change_status(status)

        assert order.status == status

    def test_cancelled_can_be_confirmed(self):
        order = self._order()
        order.change_status("CANCELLED")

        order.change_status("CONFIRMED")

        assert order.status == "CONFIRMED"

    def test_delivered_can_go_back_to_pending(self):
        order = self._order()
        order.change_status("DELIVERED")

        order.change_status("PENDING")

        assert order.status == "PENDING"

    def test_invalid_status_rejected(self):
        order = self._order()

        with pytest.raises(ValidationError) as exc:
            order.change_status("SHIPPED")

        assert exc.value.messages == {"status": ["Estado inválido"]}
        assert order.status == "PENDING"

    def test_raises_status_changed(self):
        order = self._order()

        order.change_status("CONFIRMED")

        event = order._events[-1]
        assert isinstance(event, OrderStatusChanged)
        assert event.previous_status == "PENDING"
        assert event.new_status == "CONFIRMED"
