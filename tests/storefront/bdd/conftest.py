"""Shared BDD fixtures and step definitions for orders."""

import json

import pytest
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain
from pytest_bdd import given, parsers, then
from storefront.order.order import Order
from storefront.order.placement import PlaceOrder
from storefront.product.management import AddProduct


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured domain errors."""
    return {"exc": None}


@pytest.fixture()
def catalogue():
    """Product name to id, for products created in the scenario."""
    return {}


@pytest.fixture()
def placed():
    """Container for the id of the order placed in the scenario."""
    return {"order_id": None}


@pytest.fixture()
def other_store_id():
    return "other-store"


@pytest.fixture()
def place_order(error, placed):
    """Place an order, capturing domain errors instead of raising them."""

    def _place(store_id, lines):
        command = PlaceOrder(
            store_id=store_id,
            customer_name="Luis Gómez",
            customer_email="luis@example.com",
            items=json.dumps(lines),
        )
        try:
            placed["order_id"] = current_domain.process(command, asynchronous=False)
        except (ObjectNotFoundError, ValidationError) as exc:
            error["exc"] = exc

    return _place


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.parse('a store "{slug}"'), target_fixture="store_id")
def a_store(slug):
    return f"store-{slug}"


@given(parsers.parse('the store sells "{name}" at {price:f}'))
def store_sells(store_id, catalogue, name, price):
    command = AddProduct(store_id=store_id, name=name, price=price)
    catalogue[name] = current_domain.process(command, asynchronous=False)


@given(parsers.parse('another store sells "{name}" at {price:f}'))
def other_store_sells(other_store_id, catalogue, name, price):
    command = AddProduct(store_id=other_store_id, name=name, price=price)
    catalogue[name] = current_domain.process(command, asynchronous=False)


@given("a customer has placed an order")
def customer_placed_order(store_id, catalogue, error, place_order):
    product_id = next(iter(catalogue.values()))
    place_order(store_id, [{"product_id": product_id, "quantity": 1}])
    assert error["exc"] is None


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.parse('the order status is "{status}"'))
def order_status_is(placed, status):
    order = current_domain.repository_for(Order).get(placed["order_id"])
    assert order.status == status
