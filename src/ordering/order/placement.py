"""Order placement: persist the order and clear the cart as one transaction.

Either the order (with all of its lines) is committed and the caller's cart is
empty, or nothing changed at all. The caller's cart rows are locked for the
duration of the transaction so that two concurrent submissions by the same
user queue up behind each other instead of interleaving.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field

import structlog
from protean.exceptions import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from catalog.product.product import ProductVariant
from identity.user.user import User
from ordering.cart.items import cart_items_for, clear_cart
from ordering.order.assembly import LineItemRequest, assemble_order, to_decimal
from ordering.order.order import IDEMPOTENCY_KEY_CONSTRAINT, Order
from shared.database import unit_of_work
from shared.exceptions import ConflictError, PriceMismatchError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PlaceOrder:
    user_id: str
    address_id: str
    items: Sequence[LineItemRequest] = field(default_factory=tuple)
    idempotency_key: str | None = None


def _existing_order(session: Session, user_id: str, idempotency_key: str | None) -> Order | None:
    if not idempotency_key:
        return None
    return session.scalars(
        select(Order).where(Order.user_id == user_id, Order.idempotency_key == idempotency_key)
    ).first()


def _violates_idempotency_key(exc: IntegrityError) -> bool:
    constraint = getattr(getattr(exc.orig, "diag", None), "constraint_name", None)
    if constraint:
        return constraint == IDEMPOTENCY_KEY_CONSTRAINT
    # SQLite reports the columns instead of the constraint name
    message = str(exc.orig)
    return IDEMPOTENCY_KEY_CONSTRAINT in message or "orders.idempotency_key" in message


def _check_catalog_prices(session: Session, items: Sequence[LineItemRequest]) -> None:
    variant_ids = {item.variant_id for item in items}
    variants = {
        variant.id: variant
        for variant in session.scalars(select(ProductVariant).where(ProductVariant.id.in_(variant_ids)))
    }

    unknown: list[str] = []
    mismatched: list[str] = []
    for index, item in enumerate(items):
        variant = variants.get(item.variant_id)
        if variant is None or variant.product_id != item.product_id:
            unknown.append(f"Item {index}: variant {item.variant_id} not found for product {item.product_id}")
            continue
        if to_decimal(item.price) != variant.unit_price:
            mismatched.append(f"Item {index}: price {item.price} does not match catalog price {variant.unit_price}")

    if unknown:
        raise ValidationError({"items": unknown})
    if mismatched:
        raise PriceMismatchError({"items": mismatched})


def place_order(session: Session, command: PlaceOrder, enforce_catalog_prices: bool = False) -> Order:
    """Create the order from the requested lines and empty the caller's cart.

    With an idempotency key, a repeat of an already committed request returns
    the first order and leaves the cart untouched.
    """
    try:
        with unit_of_work(session):
            existing = _existing_order(session, command.user_id, command.idempotency_key)
            if existing is not None:
                logger.info(
                    "Order replayed for idempotency key",
                    order_id=existing.id,
                    user_id=command.user_id,
                )
                return existing

            if session.get(User, command.user_id) is None:
                raise ValidationError({"user": [f"User {command.user_id} has not been synchronized yet"]})

            cart = cart_items_for(session, command.user_id, for_update=True)

            if enforce_catalog_prices:
                _check_catalog_prices(session, command.items)

            order = assemble_order(
                command.user_id,
                command.items,
                command.address_id,
                idempotency_key=command.idempotency_key,
            )
            session.add(order)
            session.flush()

            cleared = clear_cart(session, command.user_id)
    except IntegrityError as exc:
        if command.idempotency_key and _violates_idempotency_key(exc):
            # A concurrent request with the same key committed first
            raise ConflictError(
                {"idempotency_key": [f"An order for key '{command.idempotency_key}' is already being placed"]}
            ) from exc
        raise

    logger.info(
        "Order placed",
        order_id=order.id,
        order_number=order.order_number,
        user_id=command.user_id,
        total=str(order.total),
        cart_items_cleared=cleared,
        cart_items_seen=len(cart),
    )
    return order
