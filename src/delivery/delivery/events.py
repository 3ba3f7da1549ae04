"""Domain events for the Delivery aggregate."""

from protean.fields import DateTime, Float, Identifier

from delivery.domain import delivery


@delivery.event(part_of="Delivery")
class DeliveryCreated:
    """A delivery was opened for an order, with or without a driver."""

    __version__ = 1

    delivery_id = Identifier(required=True)
    order_id = Identifier(required=True)
    destination_latitude = Float(required=True)
    destination_longitude = Float(required=True)
    created_at = DateTime(required=True)


@delivery.event(part_of="Delivery")
class DriverAssigned:
    """A driver picked up the delivery."""

    __version__ = 1

    delivery_id = Identifier(required=True)
    order_id = Identifier(required=True)
    driver_id = Identifier(required=True)
    assigned_at = DateTime(required=True)


@delivery.event(part_of="Delivery")
class DeliveryCompleted:
    """The driver handed the order to the customer."""

    __version__ = 1

    delivery_id = Identifier(required=True)
    order_id = Identifier(required=True)
    driver_id = Identifier(required=True)
    delivered_at = DateTime(required=True)
