"""FastAPI endpoints for the Catalog domain: admin product management."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from catalog.api.schemas import (
    CreateProductRequest,
    PaginationResponse,
    ProductListResponse,
    ProductResponse,
)
from catalog.product.creation import CreateProduct, NewImage, NewVariant, create_product
from catalog.product.listing import ProductQuery, list_products
from identity.auth.guards import require_super_admin
from shared.database import get_session

# Every admin endpoint runs the super-admin guard before its body
admin_product_router = APIRouter(
    prefix="/admin/products",
    tags=["admin", "products"],
    dependencies=[Depends(require_super_admin)],
)


@admin_product_router.post("", response_model=ProductResponse)
def create_admin_product(
    body: CreateProductRequest,
    session: Session = Depends(get_session),
) -> ProductResponse:
    command = CreateProduct(
        name=body.name,
        description=body.description,
        price=body.price,
        compare_price=body.compare_price,
        cost=body.cost,
        brand_id=body.brand_id,
        sku=body.sku,
        slug=body.slug,
        variants=[
            NewVariant(
                sku=variant.sku,
                color_id=variant.color_id,
                size_id=variant.size_id,
                stock=variant.stock,
                price=variant.price,
            )
            for variant in body.variants
        ],
        images=[NewImage(url=str(image.url), alt=image.alt, is_default=image.is_default) for image in body.images],
    )
    product = create_product(session, command)
    return ProductResponse.model_validate(product)


@admin_product_router.get("", response_model=ProductListResponse)
def list_admin_products(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: str | None = None,
    brand: str | None = None,
    is_active: bool | None = None,
    session: Session = Depends(get_session),
) -> ProductListResponse:
    result = list_products(
        session,
        ProductQuery(page=page, limit=limit, search=search, brand=brand, is_active=is_active),
    )
    return ProductListResponse(
        products=[ProductResponse.model_validate(product) for product in result.products],
        pagination=PaginationResponse(
            total=result.total,
            pages=result.pages,
            page=result.page,
            limit=result.limit,
        ),
    )
