"""Domain events for the Driver aggregate."""

from protean.fields import DateTime, Float, Identifier, String

from delivery.domain import delivery


@delivery.event(part_of="Driver")
class DriverRegistered:
    """A driver joined the delivery fleet."""

    __version__ = 1

    driver_id = Identifier(required=True)
    name = String(required=True)
    registered_at = DateTime(required=True)


@delivery.event(part_of="Driver")
class DriverLocationUpdated:
    """The driver's device reported a new position."""

    __version__ = 1

    driver_id = Identifier(required=True)
    latitude = Float(required=True)
    longitude = Float(required=True)
    updated_at = DateTime(required=True)
