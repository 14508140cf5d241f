"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the domain's validation rules
(slug pattern, hex theme colours, positive prices) and use the camelCase field
names expected by the API's Pydantic request schemas.
"""

import random
import uuid

from faker import Faker

fake = Faker("es_ES")

ORDER_STATUSES = ["PENDING", "CONFIRMED", "DELIVERED", "CANCELLED"]


# ---------- Merchants ----------


def merchant_email() -> str:
    """Unique per call so every simulated merchant registers a fresh account."""
    local = fake.user_name()[:20]
    return f"{local}.{uuid.uuid4().hex[:6]}@{fake.free_email_domain()}"


def merchant_data(email: str | None = None) -> dict:
    return {"email": email or merchant_email(), "name": fake.name()[:255]}


# ---------- Stores ----------


def store_slug() -> str:
    """Generate slugs matching ^[a-z0-9]+(-[a-z0-9]+)*$, at most 63 chars."""
    word = "".join(c for c in fake.word().lower() if c.isascii() and c.isalnum()) or "tienda"
    return f"{word[:40]}-{uuid.uuid4().hex[:8]}"


def hex_color() -> str:
    return f"#{random.randint(0, 0xFFFFFF):06X}"


def store_data(slug: str | None = None) -> dict:
    """Generate CreateStoreRequest payload."""
    return {
        "name": fake.company()[:100],
        "slug": slug or store_slug(),
        "description": fake.catch_phrase(),
        "primaryColor": hex_color(),
    }


# ---------- Products ----------


def product_data() -> dict:
    """Generate CreateProductRequest payload."""
    return {
        "name": f"{fake.word().capitalize()} {fake.color_name()}"[:255],
        "description": fake.sentence(nb_words=12),
        "price": round(random.uniform(1.0, 150.0), 2),
        "image": fake.image_url(),
    }


def product_update_data(name: str) -> dict:
    """Generate UpdateProductRequest payload keeping the product's name."""
    return {"name": name, "price": round(random.uniform(1.0, 150.0), 2), "isActive": random.random() > 0.1}


# ---------- Orders ----------


def order_data(store_id: str, product_ids: list[str], max_lines: int = 4) -> dict:
    """Generate PlaceOrderRequest payload for a random subset of ``product_ids``.

    Includes a bogus client ``total`` which the server must ignore.
    """
    chosen = random.sample(product_ids, k=min(len(product_ids), random.randint(1, max_lines)))
    return {
        "storeId": store_id,
        "customerName": fake.name()[:255],
        "customerEmail": fake.email(),
        "customerPhone": fake.phone_number()[:50],
        "notes": fake.sentence() if random.random() < 0.3 else None,
        "items": [{"productId": pid, "quantity": random.randint(1, 5)} for pid in chosen],
        "total": 0.01,
    }


def order_status() -> str:
    return random.choice(ORDER_STATUSES)
