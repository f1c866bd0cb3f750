"""Order assembly: requested line items in, unsaved Order aggregate out.

All money arithmetic uses ``Decimal``. Each line total is rounded to cents
(half up) before the subtotal is summed, so the subtotal always equals the
sum of the stored line totals. Tax and shipping are not computed yet and are
fixed at zero.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from protean.exceptions import ValidationError

from ordering.order.numbering import generate_order_number
from ordering.order.order import Order, OrderItem, OrderStatus

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")


@dataclass(frozen=True)
class LineItemRequest:
    product_id: str
    variant_id: str
    quantity: int
    price: Decimal


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    """Convert a price to Decimal without picking up binary float noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def line_total(price: Decimal, quantity: int) -> Decimal:
    return (price * quantity).quantize(CENTS, rounding=ROUND_HALF_UP)


def _validate(items: Sequence[LineItemRequest], address_id: str) -> list[Decimal]:
    errors: dict[str, list[str]] = {}
    prices: list[Decimal] = []

    if not address_id:
        errors["address_id"] = ["Address is required"]
    if not items:
        errors["items"] = ["Order must contain at least one item"]

    for index, item in enumerate(items):
        messages = []
        if not item.product_id:
            messages.append(f"Item {index}: product_id is required")
        if not item.variant_id:
            messages.append(f"Item {index}: variant_id is required")
        if isinstance(item.quantity, bool) or not isinstance(item.quantity, int) or item.quantity < 1:
            messages.append(f"Item {index}: quantity must be a positive integer")

        try:
            price = to_decimal(item.price)
        except (InvalidOperation, TypeError, ValueError):
            price = None
        if price is None or not price.is_finite() or price < 0:
            messages.append(f"Item {index}: price must be a non-negative number")

        if messages:
            errors.setdefault("items", []).extend(messages)
        else:
            prices.append(price)

    if errors:
        raise ValidationError(errors)
    return prices


def assemble_order(
    user_id: str,
    items: Sequence[LineItemRequest],
    address_id: str,
    order_number: str | None = None,
    idempotency_key: str | None = None,
) -> Order:
    """Build the Order and its lines in memory. Nothing is persisted."""
    prices = _validate(items, address_id)

    lines = [
        OrderItem(
            position=position,
            product_id=item.product_id,
            variant_id=item.variant_id,
            quantity=item.quantity,
            price=price,
            total=line_total(price, item.quantity),
        )
        for position, (item, price) in enumerate(zip(items, prices, strict=True))
    ]

    subtotal = sum((line.total for line in lines), ZERO)
    tax = ZERO
    shipping = ZERO

    return Order(
        order_number=order_number or generate_order_number(),
        user_id=user_id,
        address_id=address_id,
        subtotal=subtotal,
        tax=tax,
        shipping=shipping,
        total=subtotal + tax + shipping,
        status=OrderStatus.PENDING.value,
        idempotency_key=idempotency_key,
        items=lines,
    )
