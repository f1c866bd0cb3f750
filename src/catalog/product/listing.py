"""Admin product listing with pagination and simple filters."""

import math
from dataclasses import dataclass

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from catalog.product.product import Product


@dataclass(frozen=True)
class ProductQuery:
    page: int = 1
    limit: int = 10
    search: str | None = None
    brand: str | None = None
    is_active: bool | None = None


@dataclass(frozen=True)
class ProductPage:
    products: list[Product]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


def list_products(session: Session, query: ProductQuery) -> ProductPage:
    conditions = []
    if query.search:
        conditions.append(
            or_(
                Product.name.icontains(query.search, autoescape=True),
                Product.description.icontains(query.search, autoescape=True),
                Product.sku.icontains(query.search, autoescape=True),
            )
        )
    if query.brand:
        conditions.append(Product.brand_id == query.brand)
    if query.is_active is not None:
        conditions.append(Product.is_active == query.is_active)

    total = session.scalar(select(func.count()).select_from(Product).where(*conditions))
    products = session.scalars(
        select(Product)
        .where(*conditions)
        .order_by(Product.created_at.desc(), Product.id)
        .offset((query.page - 1) * query.limit)
        .limit(query.limit)
    ).all()

    return ProductPage(products=list(products), total=total or 0, page=query.page, limit=query.limit)
