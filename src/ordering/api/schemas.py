"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer), separate from the
internal command dataclasses. Request bodies accept both snake_case and the
camelCase field names used by the storefront client.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_REQUEST_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Cart Schemas
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    model_config = _REQUEST_CONFIG

    product_id: str = Field(..., min_length=1)
    variant_id: str = Field(..., min_length=1)
    quantity: int = Field(1, ge=1, strict=True)


class CartItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    product_id: str
    variant_id: str
    quantity: int
    created_at: datetime


class CartResponse(BaseModel):
    items: list[CartItemResponse]


# ---------------------------------------------------------------------------
# Order Schemas
# ---------------------------------------------------------------------------
class OrderLineRequest(BaseModel):
    model_config = _REQUEST_CONFIG

    product_id: str = Field(..., min_length=1)
    variant_id: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1, strict=True)
    price: Decimal = Field(..., ge=0, allow_inf_nan=False)


class CreateOrderRequest(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "items": [
                        {"productId": "prod-a", "variantId": "var-x", "quantity": 2, "price": 19.99},
                        {"productId": "prod-b", "variantId": "var-y", "quantity": 1, "price": 5.00},
                    ],
                    "addressId": "addr-1",
                }
            ]
        },
    )

    items: list[OrderLineRequest] = Field(..., min_length=1)
    address_id: str = Field(..., min_length=1)


class OrderItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    product_id: str
    variant_id: str
    quantity: int
    price: Decimal
    total: Decimal


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    order_number: str
    user_id: str
    address_id: str
    subtotal: Decimal
    tax: Decimal
    shipping: Decimal
    total: Decimal
    status: str
    created_at: datetime
    items: list[OrderItemResponse]


class PaginationResponse(BaseModel):
    total: int
    pages: int
    page: int
    limit: int


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]
    pagination: PaginationResponse
