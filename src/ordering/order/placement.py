"""Order placement — command and handler."""

import json

from protean import handle
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order


@ordering.command(part_of="Order")
class PlaceOrder:
    user_id = String(max_length=100)
    restaurant_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of item dicts
    delivery_address = String(max_length=500)
    contact_phone = String(max_length=30)
    tax = Float(default=0.0)
    delivery_fee = Float(default=0.0)
    latitude = Float()
    longitude = Float()


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        items_data = json.loads(command.items) if isinstance(command.items, str) else command.items
        order = Order.place(
            restaurant_id=command.restaurant_id,
            items_data=items_data,
            delivery_address=command.delivery_address,
            contact_phone=command.contact_phone,
            user_id=command.user_id,
            tax=command.tax,
            delivery_fee=command.delivery_fee,
            latitude=command.latitude,
            longitude=command.longitude,
        )
        current_domain.repository_for(Order).add(order)
        return str(order.id)


def orders_for_user(user_id: str) -> list[Order]:
    """Every order the user has placed, newest first."""
    orders = current_domain.repository_for(Order)._dao.query.filter(user_id=user_id).all().items
    return sorted(orders, key=lambda order: order.order_date, reverse=True)
