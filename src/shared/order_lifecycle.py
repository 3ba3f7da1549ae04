"""Order lifecycle shared by the checkout client and the ordering backend.

The client builds its advisory validator from this table and offers only legal
transitions. The ``Order`` aggregate builds its own authoritative check from the
same table. Neither side trusts the other.

State Machine:
    PLACED → CONFIRMED → PREPARING → OUT_FOR_DELIVERY → DELIVERED
    CANCELLED (from PLACED, CONFIRMED, PREPARING, OUT_FOR_DELIVERY)
"""

from enum import Enum


class OrderStatus(Enum):
    PLACED = "PLACED"
    CONFIRMED = "CONFIRMED"
    PREPARING = "PREPARING"
    OUT_FOR_DELIVERY = "OUT_FOR_DELIVERY"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


# Targets are listed in the order a UI should offer them.
TRANSITIONS: dict[OrderStatus, tuple[OrderStatus, ...]] = {
    OrderStatus.PLACED: (OrderStatus.CONFIRMED, OrderStatus.CANCELLED),
    OrderStatus.CONFIRMED: (OrderStatus.PREPARING, OrderStatus.CANCELLED),
    OrderStatus.PREPARING: (OrderStatus.OUT_FOR_DELIVERY, OrderStatus.CANCELLED),
    OrderStatus.OUT_FOR_DELIVERY: (OrderStatus.DELIVERED, OrderStatus.CANCELLED),
    OrderStatus.DELIVERED: (),
    OrderStatus.CANCELLED: (),
}

TERMINAL_STATUSES = frozenset(status for status, targets in TRANSITIONS.items() if not targets)


def parse_status(value) -> OrderStatus | None:
    """Coerce an enum member or its wire value into ``OrderStatus``.

    Returns None for anything that is not a known status.
    """
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(value)
    except ValueError:
        return None
