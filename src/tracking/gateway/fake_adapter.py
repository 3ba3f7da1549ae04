"""Configurable fake tracking gateway for development and testing.

Tracking records are set per order; an order with no record answers like the
backend does before a driver is assigned. Pushed locations are recorded in
``pushes`` and folded into the tracking records of that driver's delivery.
"""

from dataclasses import replace

from shared.geo import Location
from tracking.exceptions import LocationPushError, TrackingUnavailable
from tracking.gateway.port import DeliveryTracking, DriverDelivery, TrackingGateway


class FakeTrackingGateway(TrackingGateway):
    """In-memory tracking gateway."""

    def __init__(self) -> None:
        self.tracking: dict[str, DeliveryTracking] = {}
        self.driver_deliveries: dict[str, DriverDelivery] = {}
        self.push_should_succeed: bool = True
        self.fetch_should_succeed: bool = True
        self.failure_reason: str = "Connection refused"
        self.fetch_calls: list[str] = []
        self.pushes: list[tuple[str, Location]] = []

    def configure(
        self,
        push_should_succeed: bool = True,
        fetch_should_succeed: bool = True,
        failure_reason: str = "Connection refused",
    ) -> None:
        """Configure gateway behavior at runtime."""
        self.push_should_succeed = push_should_succeed
        self.fetch_should_succeed = fetch_should_succeed
        self.failure_reason = failure_reason

    def set_tracking(self, tracking: DeliveryTracking) -> None:
        self.tracking[tracking.order_id] = tracking

    def set_driver_delivery(self, driver_id: str, delivery: DriverDelivery) -> None:
        self.driver_deliveries[driver_id] = delivery

    def mark_delivered(self, order_id: str) -> None:
        if order_id in self.tracking:
            self.tracking[order_id] = replace(self.tracking[order_id], is_delivered=True)
        for driver_id, delivery in self.driver_deliveries.items():
            if delivery.order_id == order_id:
                self.driver_deliveries[driver_id] = replace(delivery, is_delivered=True)

    async def fetch_tracking(self, order_id: str) -> DeliveryTracking:
        self.fetch_calls.append(order_id)
        if not self.fetch_should_succeed:
            raise TrackingUnavailable(order_id, self.failure_reason, not_found=False)
        if order_id not in self.tracking:
            raise TrackingUnavailable(order_id, "No delivery found for this order")
        return self.tracking[order_id]

    async def push_location(self, driver_id: str, location: Location) -> None:
        self.pushes.append((driver_id, location))
        if not self.push_should_succeed:
            raise LocationPushError(self.failure_reason)
        delivery = self.driver_deliveries.get(driver_id)
        if delivery is not None:
            self.driver_deliveries[driver_id] = replace(
                delivery, driver_latitude=location.latitude, driver_longitude=location.longitude
            )
            if delivery.order_id in self.tracking:
                self.tracking[delivery.order_id] = replace(
                    self.tracking[delivery.order_id],
                    driver_latitude=location.latitude,
                    driver_longitude=location.longitude,
                )

    async def fetch_driver_delivery(self, driver_id: str) -> DriverDelivery:
        self.fetch_calls.append(f"driver:{driver_id}")
        if not self.fetch_should_succeed:
            raise TrackingUnavailable(None, self.failure_reason, not_found=False)
        if driver_id not in self.driver_deliveries:
            raise TrackingUnavailable(None, f"No active delivery for driver {driver_id}")
        return self.driver_deliveries[driver_id]
