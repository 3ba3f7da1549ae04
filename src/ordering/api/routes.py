"""FastAPI routes for the Ordering domain — order placement and status updates."""

import json

import structlog
from fastapi import APIRouter, HTTPException
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from ordering.api.schemas import OrderItemSchema, OrderResponse, PlaceOrderRequest, UpdateStatusRequest
from ordering.order.order import Order
from ordering.order.placement import PlaceOrder, orders_for_user
from ordering.order.status import UpdateOrderStatus

logger = structlog.get_logger(__name__)


def _to_response(order: Order) -> OrderResponse:
    return OrderResponse(
        order_id=str(order.id),
        user_id=order.user_id,
        restaurant_id=str(order.restaurant_id),
        status=order.status,
        order_items=[
            OrderItemSchema(
                menu_item_id=item.menu_item_id,
                item_name=item.item_name or "",
                quantity=item.quantity,
                unit_price=item.unit_price,
                total_price=item.total_price,
            )
            for item in order.items or []
        ],
        subtotal=order.subtotal,
        tax=order.tax,
        delivery_fee=order.delivery_fee,
        total_amount=order.total_amount,
        delivery_address=order.delivery_address,
        contact_phone=order.contact_phone,
        latitude=order.latitude,
        longitude=order.longitude,
        order_date=order.order_date,
        last_updated=order.last_updated,
        allowed_next=[status.value for status in order.allowed_next()],
    )


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderResponse)
async def place_order(body: PlaceOrderRequest) -> OrderResponse:
    """Place one restaurant's order. Totals are recomputed server-side."""
    items_json = json.dumps(
        [item.model_dump(include={"menu_item_id", "item_name", "quantity", "unit_price"}) for item in body.order_items]
    )
    command = PlaceOrder(
        user_id=body.user_id,
        restaurant_id=body.restaurant_id,
        items=items_json,
        delivery_address=body.delivery_address,
        contact_phone=body.contact_phone,
        tax=body.tax,
        delivery_fee=body.delivery_fee,
        latitude=body.latitude,
        longitude=body.longitude,
    )
    order_id = current_domain.process(command, asynchronous=False)
    logger.info("order.placed", order_id=order_id, restaurant_id=body.restaurant_id)
    return _to_response(current_domain.repository_for(Order).get(order_id))


@order_router.get("/user/{user_id}", response_model=list[OrderResponse])
async def get_orders_for_user(user_id: str) -> list[OrderResponse]:
    """The user's order history across restaurants; empty when they have none."""
    return [_to_response(order) for order in orders_for_user(user_id)]


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str) -> OrderResponse:
    return _to_response(current_domain.repository_for(Order).get(order_id))


@order_router.patch("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(order_id: str, body: UpdateStatusRequest) -> OrderResponse:
    """Move an order along its lifecycle. Illegal transitions answer 409."""
    command = UpdateOrderStatus(order_id=order_id, status=body.status.value)
    try:
        current_domain.process(command, asynchronous=False)
    except ValidationError as exc:
        logger.warning("order.transition_rejected", order_id=order_id, to_status=body.status.value)
        raise HTTPException(status_code=409, detail=exc.messages)
    return _to_response(current_domain.repository_for(Order).get(order_id))
