"""Gestularia FastAPI application.

Serves the merchant dashboard API under ``/api`` and the public storefront
under ``/tienda/{slug}``. Requests arriving on ``<slug>.<apex>`` are rewritten
onto the storefront before routing.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay from storefront/domain.toml:
#   - "test"        → in-memory provider
#   - "development" → SQLite file
#   - "production"  → PostgreSQL from DATABASE_URL
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront.domain import storefront
from storefront.utils.logging import clear_context

storefront.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Gestularia API",
    description="Multi-tenant storefronts for small merchants",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the storefront domain context for each request."""
    clear_context()
    with storefront.domain_context():
        response = await call_next(request)
    return response


# ---------------------------------------------------------------------------
# Routers and error handling
# ---------------------------------------------------------------------------
from storefront.api import (  # noqa: E402
    analytics_router,
    order_router,
    product_router,
    store_router,
    storefront_router,
    user_router,
)
from storefront.api.errors import register_exception_handlers  # noqa: E402
from storefront.tenancy.middleware import TenantRoutingMiddleware  # noqa: E402

for router in (user_router, store_router, product_router, order_router, analytics_router):
    app.include_router(router, prefix="/api")
app.include_router(storefront_router)

register_exception_handlers(app)

# Added last so it wraps every other middleware and rewrites before routing
app.add_middleware(TenantRoutingMiddleware)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": storefront.name})
