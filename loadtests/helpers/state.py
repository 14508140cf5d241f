"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state — no cross-user sharing.
State tracks entity IDs returned by creation endpoints so follow-up
operations can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class MerchantState:
    """Tracks state for a single simulated merchant and their store."""

    email: str | None = None
    store_id: str | None = None
    slug: str | None = None
    products: dict[str, str] = field(default_factory=dict)  # id -> name
    order_ids: list[str] = field(default_factory=list)

    @property
    def headers(self) -> dict:
        return {"X-User-Email": self.email} if self.email else {}


@dataclass
class ShopperState:
    """Tracks state for a shopper browsing one storefront."""

    store_id: str | None = None
    product_ids: list[str] = field(default_factory=list)
    order_id: str | None = None
