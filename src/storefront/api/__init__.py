"""Storefront HTTP API package."""

from storefront.api.routes import (
    analytics_router,
    order_router,
    product_router,
    store_router,
    storefront_router,
    user_router,
)

__all__ = [
    "user_router",
    "store_router",
    "product_router",
    "order_router",
    "analytics_router",
    "storefront_router",
]
