"""Integration tests for the storefront HTTP API."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean.utils.globals import current_domain
from storefront.api import (
    analytics_router,
    order_router,
    product_router,
    store_router,
    storefront_router,
    user_router,
)
from storefront.api.errors import register_exception_handlers
from storefront.order.order import MAX_ITEM_QUANTITY, Order
from storefront.store.store import Store

OWNER = {"X-User-Email": "ana@example.com"}
OTHER = {"X-User-Email": "luis@example.com"}


@pytest.fixture()
def app():
    app = FastAPI()
    for router in (user_router, store_router, product_router, order_router, analytics_router):
        app.include_router(router, prefix="/api")
    app.include_router(storefront_router)
    register_exception_handlers(app)

    @app.get("/api/boom")
    async def boom():
        raise RuntimeError("unexpected")

    return app


@pytest.fixture()
def client(app):
    return TestClient(app, raise_server_exceptions=False)


def _register(client, headers=OWNER, name="Ana"):
    return client.post("/api/users", json={"email": headers["X-User-Email"], "name": name})


def _create_store(client, headers=OWNER, slug="dulces-ana", **extra):
    _register(client, headers)
    return client.post("/api/stores", json={"name": "Dulces de Ana", "slug": slug, **extra}, headers=headers)


def _create_product(client, headers=OWNER, name="Torta", price=10.0):
    response = client.post("/api/products", json={"name": name, "price": price}, headers=headers)
    return response.json()["product"]


def _place_order(client, store_id, items, **extra):
    body = {
        "storeId": store_id,
        "customerName": "Luis Gómez",
        "customerEmail": "luis@example.com",
        "items": items,
        **extra,
    }
    return client.post("/api/orders", json=body)


class TestUsersEndpoint:
    def test_register(self, client):
        response = _register(client)

        assert response.status_code == 201
        assert response.json()["user"]["email"] == "ana@example.com"

    def test_register_duplicate(self, client):
        _register(client)

        response = _register(client)

        assert response.status_code == 400
        assert response.json() == {"error": "Ya existe una cuenta con este correo electrónico"}

    def test_me(self, client):
        _register(client)

        response = client.get("/api/users/me", headers=OWNER)

        assert response.status_code == 200
        assert response.json()["user"]["name"] == "Ana"


class TestAuthentication:
    @pytest.mark.parametrize(
        "method, path",
        [
            ("post", "/api/stores"),
            ("get", "/api/stores"),
            ("get", "/api/products"),
            ("get", "/api/orders"),
            ("patch", "/api/orders/some-id"),
            ("get", "/api/analytics"),
        ],
    )
    def test_missing_identity_is_401(self, client, method, path):
        response = client.request(method, path, json={})

        assert response.status_code == 401
        assert response.json() == {"error": "No autenticado"}

    def test_unknown_user_is_404(self, client):
        response = client.get("/api/stores", headers={"X-User-Email": "nadie@example.com"})

        assert response.status_code == 404
        assert response.json() == {"error": "Usuario no encontrado"}


class TestStoresEndpoint:
    def test_create_store(self, client):
        response = _create_store(client, primaryColor="#E11D48")

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Tienda creada exitosamente"
        assert data["store"]["slug"] == "dulces-ana"
        assert data["store"]["primaryColor"] == "#E11D48"
        assert data["store"]["backgroundColor"] == "#FFFFFF"

    def test_duplicate_slug(self, client):
        _create_store(client)

        response = _create_store(client, headers=OTHER)

        assert response.status_code == 400
        assert response.json() == {"error": "Esta URL ya está en uso, prueba con otra"}
        assert len(current_domain.repository_for(Store)._dao.query.all().items) == 1

    def test_second_store_for_user(self, client):
        _create_store(client)

        response = client.post("/api/stores", json={"name": "Otra", "slug": "otra"}, headers=OWNER)

        assert response.status_code == 400
        assert response.json() == {"error": "Ya tienes una tienda creada"}

    def test_missing_fields(self, client):
        _register(client)

        response = client.post("/api/stores", json={"name": "Sin slug"}, headers=OWNER)

        assert response.status_code == 400
        assert "slug" in response.json()["error"]

    def test_get_store_without_one(self, client):
        _register(client)

        response = client.get("/api/stores", headers=OWNER)

        assert response.status_code == 200
        assert response.json() == {"store": None}

    def test_get_store_with_products_and_orders(self, client):
        store = _create_store(client).json()["store"]
        product = _create_product(client)
        _place_order(client, store["id"], [{"productId": product["id"], "quantity": 1}])

        data = client.get("/api/stores", headers=OWNER).json()["store"]

        assert data["id"] == store["id"]
        assert [p["id"] for p in data["products"]] == [product["id"]]
        assert len(data["orders"]) == 1
        assert data["orders"][0]["items"][0]["product"]["name"] == "Torta"


class TestProductsEndpoint:
    def test_create_and_get(self, client):
        _create_store(client)

        created = client.post("/api/products", json={"name": "Torta", "price": 18.5}, headers=OWNER)

        assert created.status_code == 201
        product_id = created.json()["product"]["id"]
        fetched = client.get(f"/api/products/{product_id}", headers=OWNER)
        assert fetched.status_code == 200
        assert fetched.json()["product"]["price"] == 18.5

    def test_create_without_store(self, client):
        _register(client)

        response = client.post("/api/products", json={"name": "Torta", "price": 1}, headers=OWNER)

        assert response.status_code == 404
        assert response.json() == {"error": "Tienda no encontrada"}

    def test_negative_price(self, client):
        _create_store(client)

        response = client.post("/api/products", json={"name": "Torta", "price": -1}, headers=OWNER)

        assert response.status_code == 400
        assert response.json() == {"error": "El precio debe ser un número positivo"}

    @pytest.mark.parametrize("raw_price", ["1e400", "-1e400"])
    def test_non_finite_price(self, client, raw_price):
        _create_store(client)

        response = client.post(
            "/api/products",
            content=f'{{"name": "Torta", "price": {raw_price}}}',
            headers={**OWNER, "content-type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Faltan datos requeridos o son inválidos: price"}
        assert client.get("/api/products", headers=OWNER).json() == {"products": []}

    def test_update_to_non_finite_price(self, client):
        _create_store(client)
        product = _create_product(client, price=10.0)

        response = client.put(
            f"/api/products/{product['id']}",
            content='{"name": "Torta", "price": 1e400}',
            headers={**OWNER, "content-type": "application/json"},
        )

        assert response.status_code == 400
        fetched = client.get(f"/api/products/{product['id']}", headers=OWNER)
        assert fetched.json()["product"]["price"] == 10.0

    def test_list_without_store_is_empty(self, client):
        _register(client)

        response = client.get("/api/products", headers=OWNER)

        assert response.status_code == 200
        assert response.json() == {"products": []}

    def test_update(self, client):
        _create_store(client)
        product = _create_product(client)

        response = client.put(
            f"/api/products/{product['id']}", json={"name": "Torta grande", "price": 20, "isActive": False}, headers=OWNER
        )

        assert response.status_code == 200
        assert response.json()["product"]["name"] == "Torta grande"
        assert response.json()["product"]["isActive"] is False

    def test_other_merchant_cannot_touch_product(self, client):
        _create_store(client)
        product = _create_product(client)
        _create_store(client, headers=OTHER, slug="luis")

        assert client.get(f"/api/products/{product['id']}", headers=OTHER).status_code == 404
        updated = client.put(f"/api/products/{product['id']}", json={"name": "X", "price": 1}, headers=OTHER)
        assert updated.status_code == 404
        assert updated.json() == {"error": "Producto no encontrado o sin permisos para editar"}
        assert client.delete(f"/api/products/{product['id']}", headers=OTHER).status_code == 404

    def test_delete(self, client):
        _create_store(client)
        product = _create_product(client)

        response = client.delete(f"/api/products/{product['id']}", headers=OWNER)

        assert response.status_code == 200
        assert client.get("/api/products", headers=OWNER).json() == {"products": []}
        assert client.get(f"/api/products/{product['id']}", headers=OWNER).status_code == 404
        assert client.delete(f"/api/products/{product['id']}", headers=OWNER).status_code == 404


class TestOrdersEndpoint:
    def test_place_order_prices_from_catalogue(self, client):
        store = _create_store(client).json()["store"]
        a = _create_product(client, name="A", price=10.0)
        b = _create_product(client, name="B", price=5.0)

        response = _place_order(
            client,
            store["id"],
            [{"productId": a["id"], "quantity": 2, "price": 0.01}, {"productId": b["id"], "quantity": 1}],
            total=0.5,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Pedido creado exitosamente"
        assert data["order"]["total"] == 25.0
        assert data["order"]["status"] == "PENDING"

    def test_place_order_is_public(self, client):
        store = _create_store(client).json()["store"]
        product = _create_product(client)

        response = _place_order(client, store["id"], [{"productId": product["id"], "quantity": 1}])

        assert response.status_code == 201

    def test_empty_items(self, client):
        store = _create_store(client).json()["store"]

        response = _place_order(client, store["id"], [])

        assert response.status_code == 400

    @pytest.mark.parametrize("raw_quantity", [str(MAX_ITEM_QUANTITY + 1), "1" + "0" * 400])
    def test_oversized_quantity(self, client, raw_quantity):
        store = _create_store(client).json()["store"]
        product = _create_product(client)
        body = (
            f'{{"storeId": "{store["id"]}", "customerName": "Luis", "customerEmail": "luis@example.com", '
            f'"items": [{{"productId": "{product["id"]}", "quantity": {raw_quantity}}}]}}'
        )

        response = client.post("/api/orders", content=body, headers={"content-type": "application/json"})

        assert response.status_code == 400
        assert response.json() == {"error": "Faltan datos requeridos o son inválidos: quantity"}
        assert current_domain.repository_for(Order)._dao.query.all().items == []

    def test_missing_customer(self, client):
        response = client.post("/api/orders", json={"storeId": "x", "items": [{"productId": "p", "quantity": 1}]})

        assert response.status_code == 400
        assert "error" in response.json()

    def test_foreign_product(self, client):
        store = _create_store(client).json()["store"]
        _create_store(client, headers=OTHER, slug="luis")
        foreign = _create_product(client, headers=OTHER)

        response = _place_order(client, store["id"], [{"productId": foreign["id"], "quantity": 1}])

        assert response.status_code == 404
        assert response.json() == {
            "error": "Alguno de los productos no fue encontrado o no pertenece a esta tienda."
        }
        assert current_domain.repository_for(Order)._dao.query.all().items == []

    def test_list_orders(self, client):
        store = _create_store(client).json()["store"]
        product = _create_product(client)
        first = _place_order(client, store["id"], [{"productId": product["id"], "quantity": 1}]).json()["order"]
        second = _place_order(client, store["id"], [{"productId": product["id"], "quantity": 2}]).json()["order"]

        response = client.get("/api/orders", headers=OWNER)

        assert response.status_code == 200
        assert [o["id"] for o in response.json()["orders"]] == [second["id"], first["id"]]

    def test_update_status(self, client):
        store = _create_store(client).json()["store"]
        product = _create_product(client)
        order = _place_order(client, store["id"], [{"productId": product["id"], "quantity": 1}]).json()["order"]

        response = client.patch(f"/api/orders/{order['id']}", json={"status": "CONFIRMED"}, headers=OWNER)

        assert response.status_code == 200
        assert response.json()["message"] == "Pedido actualizado exitosamente"
        assert response.json()["order"]["status"] == "CONFIRMED"

    def test_invalid_status(self, client):
        store = _create_store(client).json()["store"]
        product = _create_product(client)
        order = _place_order(client, store["id"], [{"productId": product["id"], "quantity": 1}]).json()["order"]

        response = client.patch(f"/api/orders/{order['id']}", json={"status": "SHIPPED"}, headers=OWNER)

        assert response.status_code == 400
        assert response.json() == {"error": "Estado inválido"}

    def test_foreign_order_indistinguishable_from_missing(self, client):
        store = _create_store(client).json()["store"]
        product = _create_product(client)
        order = _place_order(client, store["id"], [{"productId": product["id"], "quantity": 1}]).json()["order"]
        _create_store(client, headers=OTHER, slug="luis")

        foreign = client.patch(f"/api/orders/{order['id']}", json={"status": "CANCELLED"}, headers=OTHER)
        missing = client.patch("/api/orders/no-such-order", json={"status": "CANCELLED"}, headers=OTHER)

        assert foreign.status_code == missing.status_code == 404
        assert foreign.json() == missing.json() == {"error": "Pedido no encontrado"}


class TestAnalyticsEndpoint:
    def test_analytics(self, client):
        store = _create_store(client).json()["store"]
        a = _create_product(client, name="A", price=10.0)
        b = _create_product(client, name="B", price=5.0)
        _place_order(client, store["id"], [{"productId": a["id"], "quantity": 2}, {"productId": b["id"], "quantity": 1}])

        response = client.get("/api/analytics", headers=OWNER)

        assert response.status_code == 200
        data = response.json()
        assert data["totalRevenue"] == 25.0
        assert data["salesCount"] == 1
        assert data["averageOrderValue"] == 25.0
        assert data["topProducts"] == [
            {"productId": a["id"], "name": "A", "count": 2},
            {"productId": b["id"], "name": "B", "count": 1},
        ]
        assert len(data["dailySeries"]) == 1
        assert set(data["dailySeries"][0]) == {"name", "date", "total"}

    def test_analytics_without_orders(self, client):
        _create_store(client)

        data = client.get("/api/analytics", headers=OWNER).json()

        assert data["salesCount"] == 0
        assert data["averageOrderValue"] == 0
        assert data["dailySeries"] == []
        assert data["topProducts"] == []


class TestPublicStorefront:
    def test_storefront(self, client):
        _create_store(client)
        _create_product(client, name="Visible")
        hidden = _create_product(client, name="Oculto")
        client.put(f"/api/products/{hidden['id']}", json={"name": "Oculto", "price": 1, "isActive": False}, headers=OWNER)

        response = client.get("/tienda/dulces-ana")

        assert response.status_code == 200
        store = response.json()["store"]
        assert store["slug"] == "dulces-ana"
        assert [p["name"] for p in store["products"]] == ["Visible"]
        assert store["user"] == {"name": "Ana", "email": "ana@example.com"}

    def test_trailing_slash(self, client):
        _create_store(client)
        assert client.get("/tienda/dulces-ana/").status_code == 200

    def test_unknown_store(self, client):
        response = client.get("/tienda/no-existe")

        assert response.status_code == 404
        assert response.json() == {"error": "Tienda no encontrada"}


class TestErrorHandling:
    def test_unexpected_error_is_500(self, client):
        response = client.get("/api/boom")

        assert response.status_code == 500
        assert response.json() == {"error": "Error interno del servidor"}
