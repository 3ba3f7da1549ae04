"""Delivery creation, driver assignment and completion — commands and handler.

A new delivery takes the available driver nearest to the restaurant. With no
driver free it stays unassigned, which the tracking read reports as 404 until
``AssignDriver`` succeeds.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Float, Identifier
from protean.utils.globals import current_domain

from delivery.delivery.delivery import Delivery, DeliveryStatus
from delivery.domain import delivery
from delivery.driver.driver import Driver
from shared.geo import Location, haversine, is_valid_location

logger = structlog.get_logger(__name__)


@delivery.command(part_of="Delivery")
class CreateDelivery:
    order_id = Identifier(required=True)
    shop_latitude = Float(default=0.0)
    shop_longitude = Float(default=0.0)
    destination_latitude = Float(required=True)
    destination_longitude = Float(required=True)


@delivery.command(part_of="Delivery")
class AssignDriver:
    order_id = Identifier(required=True)


@delivery.command(part_of="Delivery")
class MarkDelivered:
    driver_id = Identifier(required=True)


def nearest_available_driver(origin: Location | None) -> Driver | None:
    """Closest available driver with a known position; any available one if ``origin`` is unknown."""
    candidates = [
        d
        for d in current_domain.repository_for(Driver)._dao.query.filter(is_available=True).all().items
        if is_valid_location(d.location)
    ]
    if not candidates:
        return None
    if not is_valid_location(origin):
        return candidates[0]
    return min(
        candidates,
        key=lambda d: haversine(origin.latitude, origin.longitude, d.latitude, d.longitude),
    )


def deliveries_for_order(order_id: str) -> list[Delivery]:
    return current_domain.repository_for(Delivery)._dao.query.filter(order_id=order_id).all().items


def active_delivery_for_driver(driver_id: str) -> Delivery:
    matches = (
        current_domain.repository_for(Delivery)
        ._dao.query.filter(driver_id=driver_id, status=DeliveryStatus.ASSIGNED.value)
        .all()
        .items
    )
    if not matches:
        raise ObjectNotFoundError({"_entity": f"No active delivery for driver {driver_id}"})
    return matches[0]


def latest_delivery_for_driver(driver_id: str) -> Delivery:
    """The driver's active delivery, else the one they completed most recently.

    A completed delivery stays readable so the driver's screen can observe
    ``is_delivered`` and stop polling.
    """
    deliveries = current_domain.repository_for(Delivery)._dao.query.filter(driver_id=driver_id).all().items
    active = [d for d in deliveries if d.status == DeliveryStatus.ASSIGNED.value]
    if active:
        return active[0]
    completed = [d for d in deliveries if d.status == DeliveryStatus.DELIVERED.value]
    if not completed:
        raise ObjectNotFoundError({"_entity": f"No delivery for driver {driver_id}"})
    return max(completed, key=lambda d: d.delivered_at)


@delivery.command_handler(part_of=Delivery)
class DeliveryAssignmentHandler:
    def _assign(self, dlv: Delivery) -> bool:
        driver = nearest_available_driver(dlv.shop_location or dlv.destination)
        if driver is None:
            logger.info("delivery.no_driver_available", order_id=dlv.order_id)
            return False
        dlv.assign_driver(driver.driver_id)
        driver.take_delivery(dlv.order_id)
        current_domain.repository_for(Driver).add(driver)
        logger.info("delivery.driver_assigned", order_id=dlv.order_id, driver_id=driver.driver_id)
        return True

    @handle(CreateDelivery)
    def create_delivery(self, command):
        if deliveries_for_order(command.order_id):
            raise ValidationError({"order_id": [f"Order {command.order_id} already has a delivery"]})

        dlv = Delivery.create(
            order_id=command.order_id,
            destination_latitude=command.destination_latitude,
            destination_longitude=command.destination_longitude,
            shop_latitude=command.shop_latitude,
            shop_longitude=command.shop_longitude,
        )
        self._assign(dlv)
        current_domain.repository_for(Delivery).add(dlv)
        return str(dlv.id)

    @handle(AssignDriver)
    def assign_driver(self, command):
        matches = deliveries_for_order(command.order_id)
        if not matches:
            raise ObjectNotFoundError({"_entity": f"No delivery for order {command.order_id}"})
        dlv = matches[0]
        if dlv.status == DeliveryStatus.UNASSIGNED.value and self._assign(dlv):
            current_domain.repository_for(Delivery).add(dlv)
        return dlv.driver_id

    @handle(MarkDelivered)
    def mark_delivered(self, command):
        dlv = active_delivery_for_driver(command.driver_id)
        dlv.mark_delivered()
        current_domain.repository_for(Delivery).add(dlv)

        driver = current_domain.repository_for(Driver).get(command.driver_id)
        driver.release()
        current_domain.repository_for(Driver).add(driver)
        return dlv.order_id
