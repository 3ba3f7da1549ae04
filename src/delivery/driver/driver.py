"""Driver aggregate (CQRS) — a courier, their last known position and availability."""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, String

from delivery.domain import delivery
from delivery.driver.events import DriverLocationUpdated, DriverRegistered
from shared.geo import Location, location_or_none


@delivery.aggregate
class Driver:
    driver_id = Identifier(identifier=True, required=True)
    name = String(max_length=100, default="")
    latitude = Float(min_value=-90.0, max_value=90.0, default=0.0)
    longitude = Float(min_value=-180.0, max_value=180.0, default=0.0)
    is_available = Boolean(default=True)
    current_order_id = Identifier()
    location_updated_at = DateTime()
    registered_at = DateTime()

    @classmethod
    def register(cls, driver_id: str, name: str | None = None):
        now = datetime.now(UTC)
        driver = cls(
            driver_id=driver_id,
            name=name or f"Driver {driver_id}",
            is_available=True,
            registered_at=now,
        )
        driver.raise_(DriverRegistered(driver_id=driver_id, name=driver.name, registered_at=now))
        return driver

    @property
    def location(self) -> Location | None:
        return location_or_none(self.latitude, self.longitude)

    def update_location(self, latitude: float, longitude: float) -> None:
        now = datetime.now(UTC)
        self.latitude = latitude
        self.longitude = longitude
        self.location_updated_at = now
        self.raise_(
            DriverLocationUpdated(
                driver_id=self.driver_id,
                latitude=latitude,
                longitude=longitude,
                updated_at=now,
            )
        )

    def take_delivery(self, order_id: str) -> None:
        if not self.is_available:
            raise ValidationError({"driver_id": [f"Driver {self.driver_id} is already on a delivery"]})
        self.is_available = False
        self.current_order_id = order_id

    def release(self) -> None:
        self.is_available = True
        self.current_order_id = None
