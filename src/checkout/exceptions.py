"""Errors raised by the checkout core."""


class CheckoutError(Exception):
    """Base class for checkout failures."""


class EmptyCartError(CheckoutError):
    """The persisted cart holds no valid restaurant group.

    Fatal to the checkout flow; the caller sends the customer back to cart review.
    """

    def __init__(self, message: str = "Cart has no restaurant groups to check out"):
        super().__init__(message)


class CheckoutInProgress(CheckoutError):
    """A second checkout run was started while one is still submitting orders."""


class SequenceStepFailure(CheckoutError):
    """A single order submission failed at ``index``.

    The checkpoint ledger is left untouched, so retrying resumes at the same index.
    """

    def __init__(self, index: int, restaurant_id: str, cause: Exception):
        self.index = index
        self.restaurant_id = restaurant_id
        self.cause = cause
        super().__init__(f"Order {index + 1} for restaurant {restaurant_id} failed: {cause}")


class InvalidTransitionError(CheckoutError):
    """A status update targeted a status outside the allowed next set. Never sent."""

    def __init__(self, from_status, to_status):
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(f"Cannot transition from {from_status} to {to_status}")


class TransitionRejected(CheckoutError):
    """The backend refused a status update the client considered legal."""

    def __init__(self, order_id: str, to_status, reason: str):
        self.order_id = order_id
        self.to_status = to_status
        self.reason = reason
        super().__init__(f"Order {order_id} rejected transition to {to_status}: {reason}")


class OrderGatewayError(CheckoutError):
    """An order call failed in transport or returned an unexpected response."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)
