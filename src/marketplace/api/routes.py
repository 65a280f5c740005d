"""FastAPI endpoints for the Marketplace domain.

The authentication collaborator in front of this service forwards the signed-in
user as `X-User-*` headers. A request without `X-User-Id` reaches the workflows
with no identity and is refused by them as not authenticated.
"""

from fastapi import APIRouter, Depends, Header

from marketplace.api.schemas import (
    AddProductRequest,
    AddToCartRequest,
    CartLine,
    CartResponse,
    ChangePriceRequest,
    CheckoutRequest,
    OrderResponse,
    PlaceOrderRequest,
    ProductResponse,
    StatusResponse,
    UpdateCartQuantityRequest,
    UpdateOrderStatusRequest,
)
from marketplace.cart.items import add_to_cart, cart_for, clear_cart, remove_from_cart, update_cart_quantity
from marketplace.checkout.placement import checkout_cart, place_order
from marketplace.order.queries import orders_placed_by, orders_received_by, orders_visible_to
from marketplace.order.status import update_order_status
from marketplace.product.listing import add_product, change_product_price, delete_product, list_products
from marketplace.shared.identity import Identity, Role
from marketplace.utils.logging import add_context

product_router = APIRouter(prefix="/products", tags=["products"])
cart_router = APIRouter(prefix="/cart", tags=["cart"])
order_router = APIRouter(prefix="/orders", tags=["orders"])


def current_identity(
    x_user_id: str | None = Header(None),
    x_user_name: str | None = Header(None),
    x_user_email: str | None = Header(None),
    x_user_role: str | None = Header(None),
) -> Identity | None:
    """Build the caller's `Identity` from the forwarded headers, or None if anonymous."""
    if not x_user_id:
        return None

    add_context(user_id=x_user_id, role=x_user_role or Role.BUYER.value)
    return Identity(
        user_id=x_user_id,
        name=x_user_name or "",
        email=x_user_email or "",
        role=x_user_role or Role.BUYER.value,
    )


# --- Product endpoints ---


@product_router.get("", response_model=list[ProductResponse])
async def get_products(category: str | None = None) -> list[ProductResponse]:
    return [ProductResponse.from_product(product) for product in list_products(category=category)]


@product_router.post("", status_code=201, response_model=ProductResponse)
async def create_product(body: AddProductRequest, identity=Depends(current_identity)) -> ProductResponse:
    product = add_product(
        identity,
        name=body.name,
        category=body.category,
        price=body.price,
        quantity=body.quantity,
        description=body.description,
        rating=body.rating,
        image_url=body.image_url,
    )
    return ProductResponse.from_product(product)


@product_router.put("/{product_id}/price", response_model=ProductResponse)
async def reprice_product(
    product_id: str, body: ChangePriceRequest, identity=Depends(current_identity)
) -> ProductResponse:
    product = change_product_price(identity, product_id, body.price)
    return ProductResponse.from_product(product)


@product_router.delete("/{product_id}", response_model=StatusResponse)
async def remove_product(product_id: str, identity=Depends(current_identity)) -> StatusResponse:
    delete_product(identity, product_id)
    return StatusResponse()


# --- Cart endpoints ---


def _cart_response(identity) -> CartResponse:
    return CartResponse(items=[CartLine(**line) for line in cart_for(identity)])


@cart_router.get("", response_model=CartResponse)
async def get_cart(identity=Depends(current_identity)) -> CartResponse:
    return _cart_response(identity)


@cart_router.post("/items", status_code=201, response_model=CartResponse)
async def add_cart_item(body: AddToCartRequest, identity=Depends(current_identity)) -> CartResponse:
    add_to_cart(identity, body.product_id, body.quantity)
    return _cart_response(identity)


@cart_router.put("/items/{product_id}", response_model=CartResponse)
async def set_cart_item_quantity(
    product_id: str, body: UpdateCartQuantityRequest, identity=Depends(current_identity)
) -> CartResponse:
    update_cart_quantity(identity, product_id, body.quantity)
    return _cart_response(identity)


@cart_router.delete("/items/{product_id}", response_model=CartResponse)
async def remove_cart_item(product_id: str, identity=Depends(current_identity)) -> CartResponse:
    remove_from_cart(identity, product_id)
    return _cart_response(identity)


@cart_router.delete("", response_model=CartResponse)
async def empty_cart(identity=Depends(current_identity)) -> CartResponse:
    clear_cart(identity)
    return _cart_response(identity)


# --- Order endpoints ---


@order_router.post("", status_code=201, response_model=OrderResponse)
async def create_order(body: PlaceOrderRequest, identity=Depends(current_identity)) -> OrderResponse:
    order = place_order(
        identity,
        [item.model_dump() for item in body.items],
        payment_method=body.payment_method,
        delivery_address=body.delivery_address,
        delivery_time=body.delivery_time,
    )
    return OrderResponse.from_order(order)


@order_router.post("/checkout", status_code=201, response_model=OrderResponse)
async def checkout(body: CheckoutRequest, identity=Depends(current_identity)) -> OrderResponse:
    order = checkout_cart(
        identity,
        payment_method=body.payment_method,
        delivery_address=body.delivery_address,
        delivery_time=body.delivery_time,
    )
    return OrderResponse.from_order(order)


@order_router.get("", response_model=list[OrderResponse])
async def get_orders(identity=Depends(current_identity)) -> list[OrderResponse]:
    return [OrderResponse.from_order(order) for order in orders_visible_to(identity)]


@order_router.get("/placed", response_model=list[OrderResponse])
async def get_placed_orders(identity=Depends(current_identity)) -> list[OrderResponse]:
    return [OrderResponse.from_order(order) for order in orders_placed_by(identity)]


@order_router.get("/received", response_model=list[OrderResponse])
async def get_received_orders(identity=Depends(current_identity)) -> list[OrderResponse]:
    return [OrderResponse.from_order(order) for order in orders_received_by(identity)]


@order_router.put("/{order_id}/status", response_model=StatusResponse)
async def change_order_status(
    order_id: str, body: UpdateOrderStatusRequest, identity=Depends(current_identity)
) -> StatusResponse:
    update_order_status(identity, order_id, body.status)
    return StatusResponse()
