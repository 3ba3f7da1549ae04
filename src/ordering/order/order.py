"""Order aggregate (CQRS) — one restaurant's share of a customer checkout.

The aggregate is the authoritative status validator. It builds its check from
the shared lifecycle table and raises ``ValidationError`` for anything else,
no matter what the client already validated.

State Machine:
    PLACED → CONFIRMED → PREPARING → OUT_FOR_DELIVERY → DELIVERED
    CANCELLED (from PLACED, CONFIRMED, PREPARING, OUT_FOR_DELIVERY)
"""

from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from ordering.domain import ordering
from ordering.order.events import OrderPlaced, OrderStatusChanged
from shared.order_lifecycle import TRANSITIONS, OrderStatus

_VALID_TRANSITIONS = {status: set(targets) for status, targets in TRANSITIONS.items()}


def _round2(value) -> float:
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    menu_item_id = String(required=True, max_length=100)
    item_name = String(max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    total_price = Float(default=0.0)


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    user_id = String(max_length=100)
    restaurant_id = Identifier(required=True)
    status = String(choices=OrderStatus, default=OrderStatus.PLACED.value)
    items = HasMany(OrderItem)
    subtotal = Float(default=0.0)
    tax = Float(default=0.0)
    delivery_fee = Float(default=0.0)
    total_amount = Float(default=0.0)
    delivery_address = String(required=True, max_length=500)
    contact_phone = String(required=True, max_length=30)
    latitude = Float()
    longitude = Float()
    order_date = DateTime()
    last_updated = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        restaurant_id: str,
        items_data: list[dict],
        delivery_address: str,
        contact_phone: str,
        user_id: str | None = None,
        tax: float | None = None,
        delivery_fee: float | None = None,
        latitude: float | None = None,
        longitude: float | None = None,
    ):
        """Place an order. Totals are recomputed from the items."""
        errors = {}
        if not items_data:
            errors["order_items"] = ["Order must contain at least one item"]
        if not (delivery_address or "").strip():
            errors["delivery_address"] = ["Delivery address is required"]
        if not (contact_phone or "").strip():
            errors["contact_phone"] = ["Contact phone is required"]
        if (latitude is None) != (longitude is None):
            errors["coordinates"] = ["Latitude and longitude must be provided together"]
        if errors:
            raise ValidationError(errors)

        items = [
            OrderItem(
                menu_item_id=str(item["menu_item_id"]),
                item_name=item.get("item_name") or "",
                quantity=item["quantity"],
                unit_price=item["unit_price"],
                total_price=_round2(Decimal(str(item["unit_price"])) * item["quantity"]),
            )
            for item in items_data
        ]
        subtotal = _round2(sum(Decimal(str(i.total_price)) for i in items))
        tax = _round2(tax or 0)
        delivery_fee = _round2(delivery_fee or 0)

        now = datetime.now(UTC)
        order = cls(
            user_id=user_id,
            restaurant_id=restaurant_id,
            status=OrderStatus.PLACED.value,
            subtotal=subtotal,
            tax=tax,
            delivery_fee=delivery_fee,
            total_amount=_round2(Decimal(str(subtotal)) + Decimal(str(tax)) + Decimal(str(delivery_fee))),
            delivery_address=delivery_address,
            contact_phone=contact_phone,
            latitude=latitude,
            longitude=longitude,
            order_date=now,
            last_updated=now,
        )
        for item in items:
            order.add_items(item)

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                user_id=user_id,
                restaurant_id=restaurant_id,
                item_count=len(items),
                subtotal=order.subtotal,
                tax=order.tax,
                delivery_fee=order.delivery_fee,
                total_amount=order.total_amount,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------
    def allowed_next(self) -> list[OrderStatus]:
        return list(TRANSITIONS[OrderStatus(self.status)])

    def _assert_can_transition(self, target_status: OrderStatus) -> None:
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def change_status(self, target_status: OrderStatus) -> None:
        """Move the order to ``target_status`` if the lifecycle allows it."""
        self._assert_can_transition(target_status)
        previous = self.status
        now = datetime.now(UTC)
        self.status = target_status.value
        self.last_updated = now
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                from_status=previous,
                to_status=target_status.value,
                changed_at=now,
            )
        )
