"""Delivery aggregate (CQRS) — moving one order from the restaurant to the customer.

State Machine:
    UNASSIGNED → ASSIGNED → DELIVERED
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, String

from delivery.delivery.events import DeliveryCompleted, DeliveryCreated, DriverAssigned
from delivery.domain import delivery
from shared.geo import Location, location_or_none


class DeliveryStatus(Enum):
    UNASSIGNED = "Unassigned"
    ASSIGNED = "Assigned"
    DELIVERED = "Delivered"


_VALID_TRANSITIONS = {
    DeliveryStatus.UNASSIGNED: {DeliveryStatus.ASSIGNED},
    DeliveryStatus.ASSIGNED: {DeliveryStatus.DELIVERED},
    DeliveryStatus.DELIVERED: set(),
}


@delivery.aggregate
class Delivery:
    order_id = Identifier(required=True)
    driver_id = Identifier()
    shop_latitude = Float(min_value=-90.0, max_value=90.0, default=0.0)
    shop_longitude = Float(min_value=-180.0, max_value=180.0, default=0.0)
    destination_latitude = Float(required=True, min_value=-90.0, max_value=90.0)
    destination_longitude = Float(required=True, min_value=-180.0, max_value=180.0)
    status = String(choices=DeliveryStatus, default=DeliveryStatus.UNASSIGNED.value)
    is_delivered = Boolean(default=False)
    created_at = DateTime()
    assigned_at = DateTime()
    delivered_at = DateTime()

    @classmethod
    def create(
        cls,
        order_id: str,
        destination_latitude: float,
        destination_longitude: float,
        shop_latitude: float = 0.0,
        shop_longitude: float = 0.0,
    ):
        """Open an unassigned delivery. The destination must be a real position."""
        if location_or_none(destination_latitude, destination_longitude) is None:
            raise ValidationError({"destination": ["Destination coordinates are required"]})

        now = datetime.now(UTC)
        dlv = cls(
            order_id=order_id,
            shop_latitude=shop_latitude or 0.0,
            shop_longitude=shop_longitude or 0.0,
            destination_latitude=destination_latitude,
            destination_longitude=destination_longitude,
            status=DeliveryStatus.UNASSIGNED.value,
            created_at=now,
        )
        dlv.raise_(
            DeliveryCreated(
                delivery_id=str(dlv.id),
                order_id=order_id,
                destination_latitude=destination_latitude,
                destination_longitude=destination_longitude,
                created_at=now,
            )
        )
        return dlv

    @property
    def shop_location(self) -> Location | None:
        return location_or_none(self.shop_latitude, self.shop_longitude)

    @property
    def destination(self) -> Location | None:
        return location_or_none(self.destination_latitude, self.destination_longitude)

    def _assert_can_transition(self, target_status: DeliveryStatus) -> None:
        current = DeliveryStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def assign_driver(self, driver_id: str) -> None:
        self._assert_can_transition(DeliveryStatus.ASSIGNED)
        now = datetime.now(UTC)
        self.driver_id = driver_id
        self.status = DeliveryStatus.ASSIGNED.value
        self.assigned_at = now
        self.raise_(
            DriverAssigned(
                delivery_id=str(self.id),
                order_id=self.order_id,
                driver_id=driver_id,
                assigned_at=now,
            )
        )

    def mark_delivered(self) -> None:
        self._assert_can_transition(DeliveryStatus.DELIVERED)
        now = datetime.now(UTC)
        self.status = DeliveryStatus.DELIVERED.value
        self.is_delivered = True
        self.delivered_at = now
        self.raise_(
            DeliveryCompleted(
                delivery_id=str(self.id),
                order_id=self.order_id,
                driver_id=self.driver_id,
                delivered_at=now,
            )
        )
