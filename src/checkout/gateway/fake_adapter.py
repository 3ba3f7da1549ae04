"""Configurable fake order gateway for development and testing.

Keeps orders in memory and applies the shared lifecycle table the way the
backend does. It can be told to fail every call, or only specific create
calls, which is how sequencing and resume behaviour are exercised.
"""

from dataclasses import replace
from datetime import UTC, datetime

from checkout.draft import DeliveryDetails, Order, OrderDraft
from checkout.exceptions import OrderGatewayError, TransitionRejected
from checkout.gateway.port import OrderGateway
from shared.order_lifecycle import TRANSITIONS, OrderStatus


class FakeOrderGateway(OrderGateway):
    """In-memory order gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Network unreachable"
        self.fail_on_create_calls: set[int] = set()
        self.calls: list[dict] = []
        self.orders: dict[str, Order] = {}
        self._create_count = 0

    def configure(
        self,
        should_succeed: bool,
        failure_reason: str = "Network unreachable",
        fail_on_create_calls: set[int] | None = None,
    ) -> None:
        """Configure gateway behavior at runtime.

        ``fail_on_create_calls`` holds zero-based create call numbers that fail
        even while ``should_succeed`` is True.
        """
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.fail_on_create_calls = set(fail_on_create_calls or ())

    @property
    def created_restaurants(self) -> list[str]:
        return [call["restaurant_id"] for call in self.calls if call["method"] == "create_order" and call["created"]]

    async def create_order(self, draft: OrderDraft, details: DeliveryDetails) -> Order:
        call_number = self._create_count
        self._create_count += 1
        call = {"method": "create_order", "restaurant_id": draft.restaurant_id, "created": False}
        self.calls.append(call)

        if not self.should_succeed or call_number in self.fail_on_create_calls:
            raise OrderGatewayError(self.failure_reason)

        now = datetime.now(UTC)
        order = Order(
            order_id=f"ord-{len(self.orders) + 1:04d}",
            restaurant_id=draft.restaurant_id,
            status=OrderStatus.PLACED,
            raw_status=OrderStatus.PLACED.value,
            items=draft.items,
            subtotal=draft.subtotal,
            tax=draft.tax,
            delivery_fee=draft.delivery_fee,
            total_amount=draft.total_amount,
            user_id=details.user_id,
            delivery_address=details.delivery_address,
            contact_phone=details.contact_phone,
            latitude=details.latitude,
            longitude=details.longitude,
            order_date=now,
            last_updated=now,
        )
        self.orders[order.order_id] = order
        call["created"] = True
        return order

    async def update_status(self, order_id: str, status: OrderStatus) -> Order:
        self.calls.append({"method": "update_status", "order_id": order_id, "status": status})
        if not self.should_succeed:
            raise OrderGatewayError(self.failure_reason)

        order = await self.get_order(order_id)
        if status not in TRANSITIONS.get(order.status, ()):
            raise TransitionRejected(order_id, status, f"Cannot transition from {order.raw_status} to {status.value}")

        updated = replace(order, status=status, raw_status=status.value, last_updated=datetime.now(UTC))
        self.orders[order_id] = updated
        return updated

    async def get_order(self, order_id: str) -> Order:
        if order_id not in self.orders:
            raise OrderGatewayError(f"Order {order_id} not found", status_code=404)
        return self.orders[order_id]
