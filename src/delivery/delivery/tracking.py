"""Read side of the delivery service: the customer's tracking record and the driver's own delivery."""

import math
from dataclasses import dataclass

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from delivery.delivery.assignment import deliveries_for_order, latest_delivery_for_driver
from delivery.delivery.delivery import Delivery
from delivery.driver.driver import Driver
from shared.geo import Location, haversine, is_valid_location

AVERAGE_SPEED_KMH = 30


def estimate_arrival(km: float) -> str:
    """Minutes to cover ``km`` at the assumed average speed, never less than one."""
    minutes = max(1, math.ceil(km / AVERAGE_SPEED_KMH * 60))
    return f"{minutes} mins"


@dataclass(frozen=True)
class TrackingView:
    order_id: str
    is_delivered: bool
    driver_name: str
    driver_latitude: float
    driver_longitude: float
    customer_latitude: float
    customer_longitude: float
    estimated_arrival: str


@dataclass(frozen=True)
class DriverDeliveryView:
    order_id: str
    is_delivered: bool
    shop_latitude: float
    shop_longitude: float
    destination_latitude: float
    destination_longitude: float
    driver_latitude: float
    driver_longitude: float


def _eta(driver: Location | None, destination: Location | None) -> str:
    if not (is_valid_location(driver) and is_valid_location(destination)):
        return ""
    return estimate_arrival(
        haversine(driver.latitude, driver.longitude, destination.latitude, destination.longitude)
    )


def tracking_for_order(order_id: str) -> TrackingView:
    """Tracking record for an order.

    Raises ``ObjectNotFoundError`` until a driver is assigned, which the
    client treats as "awaiting assignment".
    """
    matches = deliveries_for_order(order_id)
    if not matches or not matches[0].driver_id:
        raise ObjectNotFoundError({"_entity": f"No driver assigned to order {order_id} yet"})

    dlv: Delivery = matches[0]
    driver = current_domain.repository_for(Driver).get(dlv.driver_id)
    return TrackingView(
        order_id=dlv.order_id,
        is_delivered=bool(dlv.is_delivered),
        driver_name=driver.name or "",
        driver_latitude=driver.latitude or 0.0,
        driver_longitude=driver.longitude or 0.0,
        customer_latitude=dlv.destination_latitude,
        customer_longitude=dlv.destination_longitude,
        estimated_arrival="" if dlv.is_delivered else _eta(driver.location, dlv.destination),
    )


def delivery_for_driver(driver_id: str) -> DriverDeliveryView:
    """The driver's current delivery, or the last one they completed (``is_delivered`` set)."""
    dlv = latest_delivery_for_driver(driver_id)
    driver = current_domain.repository_for(Driver).get(driver_id)
    return DriverDeliveryView(
        order_id=dlv.order_id,
        is_delivered=bool(dlv.is_delivered),
        shop_latitude=dlv.shop_latitude or 0.0,
        shop_longitude=dlv.shop_longitude or 0.0,
        destination_latitude=dlv.destination_latitude,
        destination_longitude=dlv.destination_longitude,
        driver_latitude=driver.latitude or 0.0,
        driver_longitude=driver.longitude or 0.0,
    )
