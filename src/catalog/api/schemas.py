"""Pydantic request/response schemas for the Catalog API.

Request bodies accept both snake_case and the camelCase field names sent by the
admin client (`brandId`, `comparePrice`, `isDefault`).
"""

from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator, model_validator
from pydantic.alias_generators import to_camel

_CENTS = Decimal("0.01")
_REQUEST_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _to_cents(value: Decimal | None) -> Decimal | None:
    if value is None:
        return None
    return value.quantize(_CENTS, rounding=ROUND_HALF_UP)


# --- Product Request Schemas ---


class VariantRequest(BaseModel):
    model_config = _REQUEST_CONFIG

    sku: str = Field(..., min_length=1, max_length=50)
    color_id: str = Field(..., min_length=1)
    size_id: str = Field(..., min_length=1)
    stock: int = Field(..., ge=0)
    price: Decimal | None = Field(None, gt=0)

    @field_validator("price")
    @classmethod
    def round_price(cls, value: Decimal | None) -> Decimal | None:
        return _to_cents(value)


class ImageRequest(BaseModel):
    model_config = _REQUEST_CONFIG

    url: HttpUrl
    alt: str | None = Field(None, min_length=1, max_length=100)
    is_default: bool = False


class CreateProductRequest(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "name": "Classic Black T-Shirt",
                    "description": "Premium cotton crew-neck tee in black.",
                    "price": 29.99,
                    "comparePrice": 39.99,
                    "cost": 12.5,
                    "brandId": "brand-acme",
                    "sku": "TSHIRT-BLK",
                    "slug": "classic-black-tshirt",
                    "variants": [
                        {"sku": "TSHIRT-BLK-M", "colorId": "black", "sizeId": "m", "stock": 25},
                    ],
                    "images": [
                        {"url": "https://img.example.com/tshirt-black.png", "alt": "Front", "isDefault": True},
                    ],
                }
            ]
        },
    )

    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=2000)
    price: Decimal = Field(..., gt=0)
    compare_price: Decimal | None = Field(None, gt=0)
    cost: Decimal = Field(..., gt=0)
    brand_id: str = Field(..., min_length=1)
    sku: str = Field(..., min_length=1, max_length=50)
    slug: str = Field(..., min_length=1, max_length=100, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    variants: list[VariantRequest] = Field(default_factory=list)
    images: list[ImageRequest] = Field(default_factory=list)

    @field_validator("price", "compare_price", "cost")
    @classmethod
    def round_amounts(cls, value: Decimal | None) -> Decimal | None:
        return _to_cents(value)

    @model_validator(mode="after")
    def compare_price_covers_cost(self) -> CreateProductRequest:
        if self.compare_price is not None and self.compare_price < self.cost:
            raise ValueError("Compare price must be greater than or equal to cost")
        return self


# --- Response Schemas ---


class VariantResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    sku: str
    color_id: str
    size_id: str
    stock: int
    price: Decimal | None


class ImageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    url: str
    alt: str | None
    is_default: bool


class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str
    price: Decimal
    compare_price: Decimal | None
    cost: Decimal
    brand_id: str
    sku: str
    slug: str
    is_active: bool
    created_at: datetime
    variants: list[VariantResponse]
    images: list[ImageResponse]


class PaginationResponse(BaseModel):
    total: int
    pages: int
    page: int
    limit: int


class ProductListResponse(BaseModel):
    products: list[ProductResponse]
    pagination: PaginationResponse
