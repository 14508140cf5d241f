"""Pydantic request/response schemas for the storefront API.

The dashboard and storefront clients speak camelCase JSON; fields are declared
in snake_case and exposed through camelCase aliases.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from storefront.order.order import MAX_ITEM_QUANTITY


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Request Schemas ---


class RegisterUserRequest(CamelModel):
    model_config = {"json_schema_extra": {"examples": [{"email": "ana@example.com", "name": "Ana Pérez"}]}}

    email: str = Field(..., min_length=3, max_length=254)
    name: str | None = Field(None, max_length=255)


class CreateStoreRequest(CamelModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Dulces de Ana",
                    "slug": "dulces-ana",
                    "description": "Repostería artesanal por encargo.",
                    "primaryColor": "#E11D48",
                }
            ]
        }
    }

    name: str = Field(..., min_length=1, max_length=100)
    slug: str = Field(..., min_length=1, max_length=63)
    description: str | None = None
    primary_color: str | None = Field(None, max_length=7)


class CreateProductRequest(CamelModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Torta de chocolate",
                    "description": "Para 12 personas.",
                    "price": 18.5,
                    "image": "https://cdn.example.com/torta.jpg",
                }
            ]
        }
    }

    name: str = Field(..., min_length=1, max_length=255)
    price: float = Field(..., allow_inf_nan=False)
    description: str | None = None
    image: str | None = Field(None, max_length=1000)


class UpdateProductRequest(CamelModel):
    model_config = {
        "json_schema_extra": {"examples": [{"name": "Torta de chocolate", "price": 20.0, "isActive": False}]}
    }

    name: str = Field(..., min_length=1, max_length=255)
    price: float = Field(..., allow_inf_nan=False)
    description: str | None = None
    image: str | None = Field(None, max_length=1000)
    is_active: bool | None = None


class OrderLineRequest(CamelModel):
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1, le=MAX_ITEM_QUANTITY)


class PlaceOrderRequest(CamelModel):
    """Order submitted from a public storefront.

    Only product ids and quantities are read from the cart; any totals or
    prices the client adds are dropped here.
    """

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "storeId": "6f1c2d3e-4a5b-6c7d-8e9f-0a1b2c3d4e5f",
                    "customerName": "Luis Gómez",
                    "customerEmail": "luis@example.com",
                    "customerPhone": "+34 600 000 000",
                    "notes": "Entregar por la tarde",
                    "items": [{"productId": "a1b2c3d4-0000-0000-0000-000000000001", "quantity": 2}],
                }
            ]
        }
    }

    store_id: str = Field(..., min_length=1)
    customer_name: str = Field(..., min_length=1, max_length=255)
    customer_email: str = Field(..., min_length=1, max_length=254)
    customer_phone: str | None = Field(None, max_length=50)
    notes: str | None = None
    items: list[OrderLineRequest] = Field(..., min_length=1)


class UpdateOrderStatusRequest(CamelModel):
    model_config = {"json_schema_extra": {"examples": [{"status": "CONFIRMED"}]}}

    status: str = Field(..., min_length=1, max_length=20)


# --- Response Schemas ---


class UserResponse(CamelModel):
    id: str
    email: str
    name: str | None = None


class StoreResponse(CamelModel):
    id: str
    name: str
    slug: str
    description: str | None = None
    primary_color: str
    background_color: str
    is_active: bool
    created_at: datetime | None = None


class ProductResponse(CamelModel):
    id: str
    store_id: str
    name: str
    description: str | None = None
    price: float
    image: str | None = None
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class OrderItemResponse(CamelModel):
    id: str
    product_id: str
    quantity: int
    price: float
    product: ProductResponse | None = None


class OrderResponse(CamelModel):
    id: str
    store_id: str
    customer_name: str
    customer_email: str
    customer_phone: str | None = None
    notes: str | None = None
    total: float
    status: str
    created_at: datetime | None = None
    items: list[OrderItemResponse] = []


class StoreDetailResponse(StoreResponse):
    products: list[ProductResponse] = []
    orders: list[OrderResponse] = []


class StoreOwnerResponse(CamelModel):
    name: str | None = None
    email: str


class StorefrontResponse(StoreResponse):
    products: list[ProductResponse] = []
    user: StoreOwnerResponse | None = None


class UserEnvelope(CamelModel):
    user: UserResponse


class StoreEnvelope(CamelModel):
    message: str
    store: StoreResponse


class StoreDetailEnvelope(CamelModel):
    store: StoreDetailResponse | None = None


class StorefrontEnvelope(CamelModel):
    store: StorefrontResponse


class ProductEnvelope(CamelModel):
    message: str | None = None
    product: ProductResponse


class ProductListEnvelope(CamelModel):
    products: list[ProductResponse]


class OrderEnvelope(CamelModel):
    message: str
    order: OrderResponse


class OrderListEnvelope(CamelModel):
    orders: list[OrderResponse]


class MessageResponse(CamelModel):
    message: str


class DailySalesResponse(CamelModel):
    name: str
    date: str
    total: float


class TopProductResponse(CamelModel):
    product_id: str
    name: str
    count: int


class AnalyticsResponse(CamelModel):
    total_revenue: float
    sales_count: int
    average_order_value: float
    daily_series: list[DailySalesResponse]
    top_products: list[TopProductResponse]


class ErrorResponse(BaseModel):
    error: str
