"""Order status update — command and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order
from shared.order_lifecycle import parse_status


@ordering.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=30)


@ordering.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command):
        target = parse_status(command.status)
        if target is None:
            raise ValidationError({"status": [f"Unknown order status {command.status}"]})

        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.change_status(target)
        repo.add(order)
