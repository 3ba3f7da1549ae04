"""Advisory order status machine and the client-side status updater.

The backend holds the authoritative check. This copy only keeps the client from
sending transitions that cannot succeed, and never assumes an update landed.
"""

import structlog

from checkout.draft import Order
from checkout.exceptions import InvalidTransitionError, TransitionRejected
from checkout.gateway.port import OrderGateway
from shared.order_lifecycle import TRANSITIONS, OrderStatus, parse_status

logger = structlog.get_logger(__name__)


def allowed_next(status) -> list[OrderStatus]:
    """Statuses reachable from ``status``. Unknown statuses map to an empty list."""
    current = parse_status(status)
    if current is None:
        logger.warning("order_status.unknown", status=status)
        return []
    return list(TRANSITIONS[current])


def validate_transition(from_status, to_status) -> bool:
    target = parse_status(to_status)
    return target is not None and target in allowed_next(from_status)


class StatusUpdater:
    def __init__(self, gateway: OrderGateway) -> None:
        self._gateway = gateway

    async def update(self, order: Order, to_status) -> Order:
        """Send a status change for ``order`` and return the backend's record.

        Raises:
            InvalidTransitionError: the change is not allowed from the order's
                current status; nothing is sent.
            TransitionRejected: the backend refused the change.
        """
        current = order.status or order.raw_status
        if not validate_transition(current, to_status):
            logger.error(
                "order_status.invalid_transition",
                order_id=order.order_id,
                from_status=str(order.raw_status),
                to_status=str(to_status),
            )
            raise InvalidTransitionError(order.raw_status, to_status)

        target = parse_status(to_status)
        try:
            updated = await self._gateway.update_status(order.order_id, target)
        except TransitionRejected as exc:
            logger.warning(
                "order_status.rejected",
                order_id=order.order_id,
                to_status=target.value,
                reason=exc.reason,
            )
            raise

        logger.info("order_status.updated", order_id=order.order_id, status=updated.raw_status)
        return updated
