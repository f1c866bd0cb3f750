"""FastAPI routes for the Ordering domain: cart and orders."""

from fastapi import APIRouter, Depends, Header, Query
from sqlalchemy.orm import Session

from identity.auth.guards import require_auth
from ordering.api.schemas import (
    AddToCartRequest,
    CartItemResponse,
    CartResponse,
    CreateOrderRequest,
    OrderListResponse,
    OrderResponse,
    PaginationResponse,
)
from ordering.cart.items import AddToCart, add_to_cart, cart_items_for
from ordering.order.assembly import LineItemRequest
from ordering.order.history import get_order, list_orders
from ordering.order.placement import PlaceOrder, place_order
from shared.config import get_settings
from shared.database import get_session

# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.post("", response_model=CartItemResponse)
def add_cart_item(
    body: AddToCartRequest,
    user_id: str = Depends(require_auth),
    session: Session = Depends(get_session),
) -> CartItemResponse:
    command = AddToCart(
        user_id=user_id,
        product_id=body.product_id,
        variant_id=body.variant_id,
        quantity=body.quantity,
    )
    item = add_to_cart(session, command)
    return CartItemResponse.model_validate(item)


@cart_router.get("", response_model=CartResponse)
def get_cart(
    user_id: str = Depends(require_auth),
    session: Session = Depends(get_session),
) -> CartResponse:
    items = cart_items_for(session, user_id)
    return CartResponse(items=[CartItemResponse.model_validate(item) for item in items])


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", response_model=OrderResponse)
def create_order(
    body: CreateOrderRequest,
    user_id: str = Depends(require_auth),
    session: Session = Depends(get_session),
    idempotency_key: str | None = Header(default=None, max_length=255),
) -> OrderResponse:
    command = PlaceOrder(
        user_id=user_id,
        address_id=body.address_id,
        items=[
            LineItemRequest(
                product_id=item.product_id,
                variant_id=item.variant_id,
                quantity=item.quantity,
                price=item.price,
            )
            for item in body.items
        ],
        idempotency_key=idempotency_key or None,
    )
    order = place_order(session, command, enforce_catalog_prices=get_settings().enforce_catalog_prices)
    return OrderResponse.model_validate(order)


@order_router.get("", response_model=OrderListResponse)
def list_my_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user_id: str = Depends(require_auth),
    session: Session = Depends(get_session),
) -> OrderListResponse:
    result = list_orders(session, user_id, page=page, limit=limit)
    return OrderListResponse(
        orders=[OrderResponse.model_validate(order) for order in result.orders],
        pagination=PaginationResponse(
            total=result.total,
            pages=result.pages,
            page=result.page,
            limit=result.limit,
        ),
    )


@order_router.get("/{order_id}", response_model=OrderResponse)
def get_my_order(
    order_id: str,
    user_id: str = Depends(require_auth),
    session: Session = Depends(get_session),
) -> OrderResponse:
    return OrderResponse.model_validate(get_order(session, user_id, order_id))
