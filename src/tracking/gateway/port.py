"""Tracking gateway port (abstract interface).

Covers the Tracking-Fetch and Location-Push collaborators plus the driver's
own delivery lookup.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from shared.geo import Location, location_or_none


@dataclass(frozen=True)
class DeliveryTracking:
    """Tracking record for one order. Driver coordinates are 0 until a driver is assigned."""

    order_id: str
    is_delivered: bool = False
    driver_name: str = ""
    driver_latitude: float = 0.0
    driver_longitude: float = 0.0
    customer_latitude: float = 0.0
    customer_longitude: float = 0.0
    estimated_arrival: str = ""

    @property
    def driver_location(self) -> Location | None:
        return location_or_none(self.driver_latitude, self.driver_longitude)

    @property
    def customer_location(self) -> Location | None:
        return location_or_none(self.customer_latitude, self.customer_longitude)

    @classmethod
    def from_payload(cls, data: dict) -> "DeliveryTracking":
        return cls(
            order_id=str(data.get("orderId") or ""),
            is_delivered=bool(data.get("isDelivered")),
            driver_name=data.get("driverName") or "",
            driver_latitude=float(data.get("driverLatitude") or 0.0),
            driver_longitude=float(data.get("driverLongitude") or 0.0),
            customer_latitude=float(data.get("customerLatitude") or 0.0),
            customer_longitude=float(data.get("customerLongitude") or 0.0),
            estimated_arrival=data.get("estimatedArrival") or "",
        )


@dataclass(frozen=True)
class DriverDelivery:
    """The delivery a driver is currently carrying."""

    order_id: str
    is_delivered: bool = False
    shop_latitude: float = 0.0
    shop_longitude: float = 0.0
    destination_latitude: float = 0.0
    destination_longitude: float = 0.0
    driver_latitude: float = 0.0
    driver_longitude: float = 0.0

    @property
    def shop_location(self) -> Location | None:
        return location_or_none(self.shop_latitude, self.shop_longitude)

    @property
    def destination_location(self) -> Location | None:
        return location_or_none(self.destination_latitude, self.destination_longitude)

    @property
    def driver_location(self) -> Location | None:
        return location_or_none(self.driver_latitude, self.driver_longitude)

    @classmethod
    def from_payload(cls, data: dict) -> "DriverDelivery":
        return cls(
            order_id=str(data.get("orderId") or ""),
            is_delivered=bool(data.get("isDelivered")),
            shop_latitude=float(data.get("shopLatitude") or 0.0),
            shop_longitude=float(data.get("shopLongitude") or 0.0),
            destination_latitude=float(data.get("destinationLatitude") or 0.0),
            destination_longitude=float(data.get("destinationLongitude") or 0.0),
            driver_latitude=float(data.get("driverLatitude") or 0.0),
            driver_longitude=float(data.get("driverLongitude") or 0.0),
        )


class TrackingGateway(ABC):
    """Abstract tracking gateway interface."""

    @abstractmethod
    async def fetch_tracking(self, order_id: str) -> DeliveryTracking:
        """Fetch the tracking record for an order.

        Raises:
            TrackingUnavailable: ``not_found`` is True when no driver is assigned yet.
        """
        ...

    @abstractmethod
    async def push_location(self, driver_id: str, location: Location) -> None:
        """Report the driver's position.

        Raises:
            LocationPushError: the update was not acknowledged.
        """
        ...

    @abstractmethod
    async def fetch_driver_delivery(self, driver_id: str) -> DriverDelivery:
        """Fetch the driver's active delivery.

        Raises:
            TrackingUnavailable: the driver has no active delivery.
        """
        ...

    async def aclose(self) -> None:
        """Release any held connections."""
