"""Product creation: command and handler."""

from dataclasses import dataclass, field
from decimal import Decimal

import structlog
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from catalog.product.product import Product, ProductImage, ProductVariant
from shared.database import unit_of_work
from shared.exceptions import ConflictError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class NewVariant:
    sku: str
    color_id: str
    size_id: str
    stock: int = 0
    price: Decimal | None = None


@dataclass(frozen=True)
class NewImage:
    url: str
    alt: str | None = None
    is_default: bool = False


@dataclass(frozen=True)
class CreateProduct:
    name: str
    description: str
    price: Decimal
    cost: Decimal
    brand_id: str
    sku: str
    slug: str
    compare_price: Decimal | None = None
    variants: list[NewVariant] = field(default_factory=list)
    images: list[NewImage] = field(default_factory=list)


def _check_unique_keys(session: Session, command: CreateProduct) -> None:
    taken = session.scalars(
        select(Product).where(or_(Product.sku == command.sku, Product.slug == command.slug))
    ).all()
    errors: dict[str, list[str]] = {}
    for product in taken:
        if product.sku == command.sku:
            errors.setdefault("sku", []).append(f"SKU '{command.sku}' is already in use")
        if product.slug == command.slug:
            errors.setdefault("slug", []).append(f"Slug '{command.slug}' is already in use")

    variant_skus = [variant.sku for variant in command.variants]
    if len(set(variant_skus)) != len(variant_skus):
        errors.setdefault("variants", []).append("Variant SKUs must be unique")
    elif variant_skus:
        existing = session.scalars(select(ProductVariant.sku).where(ProductVariant.sku.in_(variant_skus))).all()
        for sku in existing:
            errors.setdefault("variants", []).append(f"Variant SKU '{sku}' is already in use")

    if errors:
        raise ConflictError(errors)


def create_product(session: Session, command: CreateProduct) -> Product:
    """Persist a product together with its variants and images."""
    try:
        with unit_of_work(session):
            _check_unique_keys(session, command)
            product = Product(
                name=command.name,
                description=command.description,
                price=command.price,
                compare_price=command.compare_price,
                cost=command.cost,
                brand_id=command.brand_id,
                sku=command.sku,
                slug=command.slug,
                variants=[
                    ProductVariant(
                        sku=variant.sku,
                        color_id=variant.color_id,
                        size_id=variant.size_id,
                        stock=variant.stock,
                        price=variant.price,
                    )
                    for variant in command.variants
                ],
                images=[
                    ProductImage(url=image.url, alt=image.alt, is_default=image.is_default)
                    for image in command.images
                ],
            )
            session.add(product)
            session.flush()
    except IntegrityError as exc:
        # Lost a race with a concurrent insert of the same sku/slug
        raise ConflictError({"product": ["SKU or slug is already in use"]}) from exc

    logger.info("Product created", product_id=product.id, sku=product.sku, variants=len(product.variants))
    return product
