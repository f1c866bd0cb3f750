"""Cart item management: add-to-cart, the cart snapshot reader and clearing."""

from dataclasses import dataclass

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from catalog.product.product import ProductVariant
from identity.user.user import User
from ordering.cart.cart import CartItem
from shared.database import unit_of_work

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class AddToCart:
    user_id: str
    product_id: str
    variant_id: str
    quantity: int = 1


def add_to_cart(session: Session, command: AddToCart) -> CartItem:
    """Create a new cart row for the caller."""
    if isinstance(command.quantity, bool) or not isinstance(command.quantity, int) or command.quantity < 1:
        raise ValidationError({"quantity": ["Quantity must be a positive integer"]})

    with unit_of_work(session):
        if session.get(User, command.user_id) is None:
            raise ObjectNotFoundError({"user": [f"User {command.user_id} not found"]})

        variant = session.get(ProductVariant, command.variant_id)
        if variant is None or variant.product_id != command.product_id:
            raise ObjectNotFoundError(
                {"variant_id": [f"Variant {command.variant_id} not found for product {command.product_id}"]}
            )

        item = CartItem(
            user_id=command.user_id,
            product_id=command.product_id,
            variant_id=command.variant_id,
            quantity=command.quantity,
        )
        session.add(item)
        session.flush()

    logger.info("Item added to cart", user_id=command.user_id, variant_id=command.variant_id, quantity=item.quantity)
    return item


def cart_items_for(session: Session, user_id: str, for_update: bool = False) -> list[CartItem]:
    """Return the user's cart rows, oldest first.

    With ``for_update`` the rows are locked until the surrounding transaction
    ends (ignored by databases without row locks, such as SQLite).
    """
    statement = select(CartItem).where(CartItem.user_id == user_id).order_by(CartItem.created_at, CartItem.id)
    if for_update:
        statement = statement.with_for_update()
    return list(session.scalars(statement))


def clear_cart(session: Session, user_id: str) -> int:
    """Delete every cart row of the user within the current transaction."""
    result = session.execute(delete(CartItem).where(CartItem.user_id == user_id))
    return result.rowcount
