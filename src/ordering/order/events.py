"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A customer placed an order with one restaurant."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = String()
    restaurant_id = Identifier(required=True)
    item_count = Integer(required=True)
    subtotal = Float(required=True)
    tax = Float(required=True)
    delivery_fee = Float(required=True)
    total_amount = Float(required=True)
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderStatusChanged:
    """The order moved along its lifecycle."""

    __version__ = 1

    order_id = Identifier(required=True)
    from_status = String(required=True)
    to_status = String(required=True)
    changed_at = DateTime(required=True)
