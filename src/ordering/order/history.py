"""Order history queries for the owning customer."""

import math
from dataclasses import dataclass

from protean.exceptions import ObjectNotFoundError
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ordering.order.order import Order


@dataclass(frozen=True)
class OrderPage:
    orders: list[Order]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


def list_orders(session: Session, user_id: str, page: int = 1, limit: int = 10) -> OrderPage:
    """The user's orders, newest first."""
    condition = Order.user_id == user_id
    total = session.scalar(select(func.count()).select_from(Order).where(condition))
    orders = session.scalars(
        select(Order)
        .where(condition)
        .order_by(Order.created_at.desc(), Order.id)
        .offset((page - 1) * limit)
        .limit(limit)
    ).all()
    return OrderPage(orders=list(orders), total=total or 0, page=page, limit=limit)


def get_order(session: Session, user_id: str, order_id: str) -> Order:
    order = session.get(Order, order_id)
    # Someone else's order is reported exactly like a missing one
    if order is None or order.user_id != user_id:
        raise ObjectNotFoundError({"order": [f"Order {order_id} not found"]})
    return order
