"""Pydantic request/response schemas for the Marketplace API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

# --- Product Schemas ---


class AddProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Organic Urea 45kg",
                    "description": "Slow-release nitrogen fertilizer for paddy and wheat.",
                    "category": "fertilizers",
                    "price": 25.99,
                    "quantity": 50,
                    "image_url": "https://cdn.example.com/urea.jpg",
                }
            ]
        }
    }

    name: str = Field(..., max_length=255)
    description: str | None = None
    category: str
    price: float = Field(..., ge=0)
    quantity: int = Field(..., ge=0)
    rating: float = Field(0.0, ge=0, le=5)
    image_url: str | None = Field(None, max_length=500)


class ChangePriceRequest(BaseModel):
    price: float = Field(..., ge=0)


class ProductResponse(BaseModel):
    id: str
    name: str
    description: str | None = None
    category: str
    price: float
    quantity: int
    seller: str | None = None
    seller_id: str
    rating: float = 0.0
    image_url: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_product(cls, product) -> ProductResponse:
        return cls(
            id=str(product.id),
            name=product.name,
            description=product.description,
            category=product.category,
            price=product.price,
            quantity=product.quantity,
            seller=product.seller,
            seller_id=str(product.seller_id),
            rating=product.rating or 0.0,
            image_url=product.image_url,
            created_at=product.created_at,
        )


# --- Cart Schemas ---


class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = Field(1, ge=1)


class UpdateCartQuantityRequest(BaseModel):
    quantity: int


class CartLine(BaseModel):
    product_id: str
    quantity: int


class CartResponse(BaseModel):
    items: list[CartLine] = Field(default_factory=list)


# --- Order Schemas ---


class LineItemRequest(BaseModel):
    product_id: str
    quantity: int = Field(..., ge=1)


class CheckoutRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "payment_method": "upi",
                    "delivery_address": "Plot 12, Market Yard, Nashik 422001",
                    "delivery_time": "Within 1 hour",
                }
            ]
        }
    }

    payment_method: str
    delivery_address: str
    delivery_time: str | None = Field(None, max_length=100)


class PlaceOrderRequest(CheckoutRequest):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [{"product_id": "prod-001", "quantity": 2}],
                    "payment_method": "cash",
                    "delivery_address": "Plot 12, Market Yard, Nashik 422001",
                }
            ]
        }
    }

    items: list[LineItemRequest] = Field(..., min_length=1)


class UpdateOrderStatusRequest(BaseModel):
    status: str


class OrderLineItemResponse(BaseModel):
    product_id: str
    product_name: str
    quantity: int
    price: float
    seller: str | None = None
    seller_id: str


class OrderResponse(BaseModel):
    id: str
    buyer_id: str
    buyer_name: str | None = None
    buyer_email: str | None = None
    items: list[OrderLineItemResponse]
    total_amount: float
    payment_method: str
    delivery_address: str
    delivery_time: str | None = None
    order_date: datetime
    status: str

    @classmethod
    def from_order(cls, order) -> OrderResponse:
        return cls(
            id=str(order.id),
            buyer_id=str(order.buyer_id),
            buyer_name=order.buyer_name,
            buyer_email=order.buyer_email,
            items=[
                OrderLineItemResponse(
                    product_id=str(item.product_id),
                    product_name=item.product_name,
                    quantity=item.quantity,
                    price=item.price,
                    seller=item.seller,
                    seller_id=str(item.seller_id),
                )
                for item in order.items
            ],
            total_amount=order.total_amount,
            payment_method=order.payment_method,
            delivery_address=order.delivery_address,
            delivery_time=order.delivery_time,
            order_date=order.order_date,
            status=order.status,
        )


# --- Common ---


class StatusResponse(BaseModel):
    status: str = "ok"
