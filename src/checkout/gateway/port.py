"""Order gateway port (abstract interface).

Defines the contract for the Order-Create and Order-Status-Update
collaborators. The checkout core programs against this port; the fake and
HTTP adapters are swapped via configuration.
"""

from abc import ABC, abstractmethod

from checkout.draft import DeliveryDetails, Order, OrderDraft
from shared.order_lifecycle import OrderStatus


class OrderGateway(ABC):
    """Abstract order gateway interface."""

    @abstractmethod
    async def create_order(self, draft: OrderDraft, details: DeliveryDetails) -> Order:
        """Submit one draft. The backend assigns ``order_id`` and sets PLACED.

        Raises:
            OrderGatewayError: the order was not created.
        """
        ...

    @abstractmethod
    async def update_status(self, order_id: str, status: OrderStatus) -> Order:
        """Request a status change and return the authoritative order.

        Raises:
            TransitionRejected: the backend refused the transition.
            OrderGatewayError: transport failure or unknown order.
        """
        ...

    @abstractmethod
    async def get_order(self, order_id: str) -> Order:
        ...

    async def aclose(self) -> None:
        """Release any held connections."""
