"""Storefront load test scenarios.

MerchantJourney onboards a merchant end to end and then keeps managing the
store; ShopperJourney browses the public storefront of a store created by
this process and places orders against it. Steps execute in order, each
depends on the previous step succeeding.
"""

import os
import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import (
    merchant_data,
    order_data,
    order_status,
    product_data,
    product_update_data,
    store_data,
)
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import MerchantState, ShopperState

APEX_DOMAIN = os.getenv("GESTULARIA_APEX_DOMAIN", "gestularia.com")

# (store_id, slug, [product ids]) of stores opened by MerchantJourney users
OPEN_STORES: list[tuple[str, str, list[str]]] = []


class MerchantJourney(SequentialTaskSet):
    """Register -> Create store -> Add products -> Sell -> Manage orders -> Analytics."""

    def on_start(self):
        self.state = MerchantState()

    @task
    def register(self):
        payload = merchant_data()
        with self.client.post("/api/users", json=payload, catch_response=True, name="POST /api/users") as resp:
            if resp.status_code == 201:
                self.state.email = payload["email"]
            else:
                resp.failure(f"Register failed: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def create_store(self):
        payload = store_data()
        with self.client.post(
            "/api/stores",
            json=payload,
            headers=self.state.headers,
            catch_response=True,
            name="POST /api/stores",
        ) as resp:
            if resp.status_code == 200:
                store = resp.json()["store"]
                self.state.store_id = store["id"]
                self.state.slug = store["slug"]
            else:
                resp.failure(f"Create store failed: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def add_products(self):
        for _ in range(random.randint(3, 8)):
            with self.client.post(
                "/api/products",
                json=product_data(),
                headers=self.state.headers,
                catch_response=True,
                name="POST /api/products",
            ) as resp:
                if resp.status_code == 201:
                    product = resp.json()["product"]
                    self.state.products[product["id"]] = product["name"]
                else:
                    resp.failure(f"Add product failed: {extract_error_detail(resp)}")

        if not self.state.products:
            self.interrupt()
        OPEN_STORES.append((self.state.store_id, self.state.slug, list(self.state.products)))

    @task
    def receive_orders(self):
        for _ in range(random.randint(1, 4)):
            payload = order_data(self.state.store_id, list(self.state.products))
            with self.client.post("/api/orders", json=payload, catch_response=True, name="POST /api/orders") as resp:
                if resp.status_code == 201:
                    self.state.order_ids.append(resp.json()["order"]["id"])
                else:
                    resp.failure(f"Place order failed: {extract_error_detail(resp)}")

    @task
    def list_orders(self):
        self.client.get("/api/orders", headers=self.state.headers, name="GET /api/orders")

    @task
    def update_order_statuses(self):
        for order_id in self.state.order_ids:
            self.client.patch(
                f"/api/orders/{order_id}",
                json={"status": order_status()},
                headers=self.state.headers,
                name="PATCH /api/orders/{id}",
            )

    @task
    def reprice_product(self):
        product_id, name = random.choice(list(self.state.products.items()))
        self.client.put(
            f"/api/products/{product_id}",
            json=product_update_data(name),
            headers=self.state.headers,
            name="PUT /api/products/{id}",
        )

    @task
    def view_dashboard(self):
        self.client.get("/api/stores", headers=self.state.headers, name="GET /api/stores")
        self.client.get("/api/analytics", headers=self.state.headers, name="GET /api/analytics")

    @task
    def done(self):
        self.interrupt()


class ShopperJourney(SequentialTaskSet):
    """Visit storefront (by path and by subdomain) -> Place order."""

    def on_start(self):
        self.state = ShopperState()
        self.slug = None

    @task
    def pick_store(self):
        if not OPEN_STORES:
            self.interrupt()
            return
        self.state.store_id, self.slug, self.state.product_ids = random.choice(OPEN_STORES)

    @task
    def visit_storefront(self):
        with self.client.get(f"/tienda/{self.slug}", catch_response=True, name="GET /tienda/{slug}") as resp:
            if resp.status_code == 200:
                products = resp.json()["store"]["products"]
                if products:
                    self.state.product_ids = [p["id"] for p in products]
            else:
                resp.failure(f"Storefront failed: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def visit_subdomain(self):
        self.client.get("/", headers={"Host": f"{self.slug}.{APEX_DOMAIN}"}, name="GET <slug>.<apex>/")

    @task
    def place_order(self):
        payload = order_data(self.state.store_id, self.state.product_ids, max_lines=2)
        with self.client.post("/api/orders", json=payload, catch_response=True, name="POST /api/orders") as resp:
            if resp.status_code == 201:
                self.state.order_id = resp.json()["order"]["id"]
            else:
                resp.failure(f"Place order failed: {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class MerchantUser(HttpUser):
    """Simulates merchants onboarding and running their store."""

    wait_time = between(1, 3)
    weight = 1
    tasks = [MerchantJourney]


class ShopperUser(HttpUser):
    """Simulates shoppers buying from stores opened during the run."""

    wait_time = between(0.5, 2)
    weight = 4
    tasks = [ShopperJourney]
