"""FastAPI endpoints for the storefront.

Owner endpoints resolve the caller (and their store) through the dependencies
in ``storefront.api.dependencies``; every read and write is then scoped to that
store. Order placement and the public storefront are unauthenticated.
"""

import json

from fastapi import APIRouter
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.analytics.sales import sales_summary_for_store
from storefront.api.dependencies import CurrentStore, CurrentUser, OptionalStore
from storefront.api.schemas import (
    AnalyticsResponse,
    CreateProductRequest,
    CreateStoreRequest,
    DailySalesResponse,
    MessageResponse,
    OrderEnvelope,
    OrderItemResponse,
    OrderListEnvelope,
    OrderResponse,
    PlaceOrderRequest,
    ProductEnvelope,
    ProductListEnvelope,
    ProductResponse,
    RegisterUserRequest,
    StoreDetailEnvelope,
    StoreDetailResponse,
    StoreEnvelope,
    StorefrontEnvelope,
    StorefrontResponse,
    StoreOwnerResponse,
    StoreResponse,
    TopProductResponse,
    UpdateOrderStatusRequest,
    UpdateProductRequest,
    UserEnvelope,
    UserResponse,
)
from storefront.merchant.registration import RegisterUser
from storefront.merchant.user import User
from storefront.order.order import Order
from storefront.order.placement import PlaceOrder
from storefront.order.status import UpdateOrderStatus
from storefront.product.management import AddProduct, RemoveProduct, UpdateProduct
from storefront.product.product import Product
from storefront.store.provisioning import CreateStore
from storefront.store.store import Store

user_router = APIRouter(prefix="/users", tags=["users"])
store_router = APIRouter(prefix="/stores", tags=["stores"])
product_router = APIRouter(prefix="/products", tags=["products"])
order_router = APIRouter(prefix="/orders", tags=["orders"])
analytics_router = APIRouter(prefix="/analytics", tags=["analytics"])
storefront_router = APIRouter(prefix="/tienda", tags=["storefront"])


# --- Payload builders ---


def user_payload(user) -> UserResponse:
    return UserResponse(id=str(user.id), email=user.email, name=user.name)


def store_payload(store) -> dict:
    return {
        "id": str(store.id),
        "name": store.name,
        "slug": store.slug,
        "description": store.description,
        "primary_color": store.theme.primary_color,
        "background_color": store.theme.background_color,
        "is_active": store.is_active,
        "created_at": store.created_at,
    }


def product_payload(product) -> ProductResponse:
    return ProductResponse(
        id=str(product.id),
        store_id=str(product.store_id),
        name=product.name,
        description=product.description,
        price=product.price,
        image=product.image,
        is_active=product.is_active,
        created_at=product.created_at,
        updated_at=product.updated_at,
    )


def order_payload(order, products=None) -> OrderResponse:
    """Serialize ``order``; ``products`` maps product id to its current payload."""
    products = products or {}
    return OrderResponse(
        id=str(order.id),
        store_id=str(order.store_id),
        customer_name=order.customer_name,
        customer_email=order.customer_email,
        customer_phone=order.customer_phone,
        notes=order.notes,
        total=order.total,
        status=order.status,
        created_at=order.created_at,
        items=[
            OrderItemResponse(
                id=str(item.id),
                product_id=str(item.product_id),
                quantity=item.quantity,
                price=item.price,
                product=products.get(str(item.product_id)),
            )
            for item in order.items
        ],
    )


def _store_products(store_id):
    return {str(p.id): product_payload(p) for p in current_domain.repository_for(Product).for_store(store_id)}


# --- User endpoints ---


@user_router.post("", status_code=201, response_model=UserEnvelope)
async def register_user(body: RegisterUserRequest) -> UserEnvelope:
    command = RegisterUser(email=body.email, name=body.name)
    user_id = current_domain.process(command, asynchronous=False)
    user = current_domain.repository_for(User).get(user_id)
    return UserEnvelope(user=user_payload(user))


@user_router.get("/me", response_model=UserEnvelope)
async def get_me(user: CurrentUser) -> UserEnvelope:
    return UserEnvelope(user=user_payload(user))


# --- Store endpoints ---


@store_router.post("", response_model=StoreEnvelope)
async def create_store(body: CreateStoreRequest, user: CurrentUser) -> StoreEnvelope:
    command = CreateStore(
        user_id=str(user.id),
        name=body.name,
        slug=body.slug,
        description=body.description,
        primary_color=body.primary_color,
    )
    store_id = current_domain.process(command, asynchronous=False)
    store = current_domain.repository_for(Store).get(store_id)
    return StoreEnvelope(message="Tienda creada exitosamente", store=StoreResponse(**store_payload(store)))


@store_router.get("", response_model=StoreDetailEnvelope)
async def get_my_store(store: OptionalStore) -> StoreDetailEnvelope:
    if store is None:
        return StoreDetailEnvelope(store=None)

    products = _store_products(store.id)
    orders = current_domain.repository_for(Order).for_store(store.id)
    return StoreDetailEnvelope(
        store=StoreDetailResponse(
            **store_payload(store),
            products=list(products.values()),
            orders=[order_payload(order, products) for order in orders],
        )
    )


# --- Product endpoints ---


@product_router.post("", status_code=201, response_model=ProductEnvelope)
async def create_product(body: CreateProductRequest, store: CurrentStore) -> ProductEnvelope:
    command = AddProduct(
        store_id=str(store.id),
        name=body.name,
        price=body.price,
        description=body.description,
        image=body.image,
    )
    product_id = current_domain.process(command, asynchronous=False)
    product = current_domain.repository_for(Product).get(product_id)
    return ProductEnvelope(message="Producto creado exitosamente", product=product_payload(product))


@product_router.get("", response_model=ProductListEnvelope)
async def list_products(store: OptionalStore) -> ProductListEnvelope:
    if store is None:
        return ProductListEnvelope(products=[])
    return ProductListEnvelope(products=list(_store_products(store.id).values()))


@product_router.get("/{product_id}", response_model=ProductEnvelope)
async def get_product(product_id: str, store: CurrentStore) -> ProductEnvelope:
    product = current_domain.repository_for(Product).find_in_store(store.id, product_id)
    if product is None:
        raise ObjectNotFoundError("Producto no encontrado")
    return ProductEnvelope(product=product_payload(product))


@product_router.put("/{product_id}", response_model=ProductEnvelope)
async def update_product(product_id: str, body: UpdateProductRequest, store: CurrentStore) -> ProductEnvelope:
    command = UpdateProduct(
        store_id=str(store.id),
        product_id=product_id,
        name=body.name,
        price=body.price,
        description=body.description,
        image=body.image,
        is_active=body.is_active,
    )
    current_domain.process(command, asynchronous=False)
    product = current_domain.repository_for(Product).get(product_id)
    return ProductEnvelope(message="Producto actualizado exitosamente", product=product_payload(product))


@product_router.delete("/{product_id}", response_model=MessageResponse)
async def delete_product(product_id: str, store: CurrentStore) -> MessageResponse:
    command = RemoveProduct(store_id=str(store.id), product_id=product_id)
    current_domain.process(command, asynchronous=False)
    return MessageResponse(message="Producto eliminado exitosamente")


# --- Order endpoints ---


@order_router.post("", status_code=201, response_model=OrderEnvelope)
async def place_order(body: PlaceOrderRequest) -> OrderEnvelope:
    command = PlaceOrder(
        store_id=body.store_id,
        customer_name=body.customer_name,
        customer_email=body.customer_email,
        customer_phone=body.customer_phone,
        notes=body.notes,
        items=json.dumps([{"product_id": line.product_id, "quantity": line.quantity} for line in body.items]),
    )
    order_id = current_domain.process(command, asynchronous=False)
    order = current_domain.repository_for(Order).get(order_id)
    return OrderEnvelope(message="Pedido creado exitosamente", order=order_payload(order))


@order_router.get("", response_model=OrderListEnvelope)
async def list_orders(store: CurrentStore) -> OrderListEnvelope:
    products = _store_products(store.id)
    orders = current_domain.repository_for(Order).for_store(store.id)
    return OrderListEnvelope(orders=[order_payload(order, products) for order in orders])


@order_router.patch("/{order_id}", response_model=OrderEnvelope)
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest, store: CurrentStore) -> OrderEnvelope:
    command = UpdateOrderStatus(store_id=str(store.id), order_id=order_id, status=body.status)
    current_domain.process(command, asynchronous=False)
    order = current_domain.repository_for(Order).get(order_id)
    return OrderEnvelope(message="Pedido actualizado exitosamente", order=order_payload(order))


# --- Analytics ---


@analytics_router.get("", response_model=AnalyticsResponse)
async def get_analytics(store: CurrentStore) -> AnalyticsResponse:
    summary = sales_summary_for_store(store.id)
    return AnalyticsResponse(
        total_revenue=summary.total_revenue,
        sales_count=summary.sales_count,
        average_order_value=summary.average_order_value,
        daily_series=[
            DailySalesResponse(name=day.label, date=day.day.isoformat(), total=day.total)
            for day in summary.daily_series
        ],
        top_products=[
            TopProductResponse(product_id=entry.product_id, name=entry.name, count=entry.count)
            for entry in summary.top_products
        ],
    )


# --- Public storefront ---


@storefront_router.get("/{slug}", response_model=StorefrontEnvelope)
@storefront_router.get("/{slug}/", response_model=StorefrontEnvelope, include_in_schema=False)
async def get_storefront(slug: str) -> StorefrontEnvelope:
    store = current_domain.repository_for(Store).find_by_slug(slug)
    if store is None or not store.is_active:
        raise ObjectNotFoundError("Tienda no encontrada")

    products = current_domain.repository_for(Product).for_store(store.id, active_only=True)
    try:
        owner = current_domain.repository_for(User).get(store.user_id)
    except ObjectNotFoundError:
        owner = None

    return StorefrontEnvelope(
        store=StorefrontResponse(
            **store_payload(store),
            products=[product_payload(p) for p in products],
            user=StoreOwnerResponse(name=owner.name, email=owner.email) if owner else None,
        )
    )
