"""Presentation snapshots derived from tracking data.

A snapshot is everything a map screen needs: which state to show, both
positions, the distance between them and the polyline to draw.
"""

from dataclasses import dataclass, field
from enum import Enum

from shared.geo import Location, distance_km, is_valid_location, midpoint
from tracking.gateway.port import DeliveryTracking


class PresentationState(Enum):
    LOADING = "loading"
    AWAITING_ASSIGNMENT = "awaitingAssignment"
    TRACKING = "tracking"
    DELIVERED = "delivered"


@dataclass(frozen=True)
class TrackingSnapshot:
    state: PresentationState
    order_id: str | None = None
    driver_name: str = ""
    driver_location: Location | None = None
    customer_location: Location | None = None
    distance_km: float | None = None
    route_points: list[Location] = field(default_factory=list)
    estimated_arrival: str = ""
    map_center: Location | None = None
    last_error: str | None = None
    location_error: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.state is PresentationState.DELIVERED


def build_route(driver: Location | None, customer: Location | None, shop: Location | None = None) -> list[Location]:
    """Polyline for the map: driver→customer, or shop→driver→customer for the driver's view.

    Empty whenever the driver position is unset.
    """
    if not is_valid_location(driver) or not is_valid_location(customer):
        return []
    if is_valid_location(shop):
        return [shop, driver, customer]
    return [driver, customer]


def loading(order_id: str | None, customer: Location | None = None) -> TrackingSnapshot:
    return TrackingSnapshot(state=PresentationState.LOADING, order_id=order_id, customer_location=customer, map_center=customer)


def awaiting_assignment(
    order_id: str | None,
    customer: Location | None,
    last_error: str | None = None,
    location_error: str | None = None,
) -> TrackingSnapshot:
    """Degraded state: no driver yet, so only the customer's own position is shown."""
    return TrackingSnapshot(
        state=PresentationState.AWAITING_ASSIGNMENT,
        order_id=order_id,
        customer_location=customer,
        route_points=[],
        map_center=customer,
        last_error=last_error,
        location_error=location_error,
    )


def derive_snapshot(
    tracking: DeliveryTracking,
    customer: Location | None = None,
    driver: Location | None = None,
    shop: Location | None = None,
    location_error: str | None = None,
) -> TrackingSnapshot:
    """Merge a tracking record with locally known positions.

    ``customer`` (a device sample) wins over the record's customer coordinates
    when valid; ``driver`` likewise for the driver's own view.
    """
    customer = customer if is_valid_location(customer) else tracking.customer_location
    driver = driver if is_valid_location(driver) else tracking.driver_location

    if tracking.is_delivered:
        return TrackingSnapshot(
            state=PresentationState.DELIVERED,
            order_id=tracking.order_id,
            driver_name=tracking.driver_name,
            driver_location=driver,
            customer_location=customer,
            route_points=[],
            estimated_arrival=tracking.estimated_arrival,
            map_center=customer or driver,
            location_error=location_error,
        )

    if not is_valid_location(driver):
        return awaiting_assignment(tracking.order_id, customer, location_error=location_error)

    if is_valid_location(customer):
        distance = distance_km(driver, customer)
        center = midpoint(driver, customer)
    else:
        distance = None
        center = driver

    return TrackingSnapshot(
        state=PresentationState.TRACKING,
        order_id=tracking.order_id,
        driver_name=tracking.driver_name,
        driver_location=driver,
        customer_location=customer,
        distance_km=distance,
        route_points=build_route(driver, customer, shop),
        estimated_arrival=tracking.estimated_arrival,
        map_center=center,
        location_error=location_error,
    )
