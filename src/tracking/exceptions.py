"""Errors raised inside the tracking core.

None of these escape a running ``TrackingSubscription``; the reconciler turns
them into presentation state.
"""


class TrackingError(Exception):
    """Base class for tracking failures."""


class TrackingUnavailable(TrackingError):
    """No tracking data for an order.

    ``not_found`` separates "no driver assigned yet" (the backend answered 404)
    from transport or server failures.
    """

    def __init__(self, order_id: str | None, reason: str, not_found: bool = True):
        self.order_id = order_id
        self.reason = reason
        self.not_found = not_found
        super().__init__(f"Tracking unavailable for order {order_id}: {reason}")


class LocationUnavailable(TrackingError):
    """The device location could not be sampled (permission denied, no signal)."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class LocationPushError(TrackingError):
    """A driver location update did not reach the backend."""
