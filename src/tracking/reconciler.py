"""Tracking reconciler — polling loops merged into one snapshot stream.

A customer subscription polls the order's tracking record on the tracking
cadence. A driver subscription pushes the device position on the push cadence
and, on the tracking cadence, re-reads the driver's own delivery to draw the
shop→driver→customer route. Each subscription is the single cancellation
handle for its loops, and a delivered order stops them on its own.

No tracking failure leaves a loop: a missing record or an unreachable backend
becomes the ``awaitingAssignment`` state, push failures are logged and
dropped, and the next tick runs on schedule.
"""

import asyncio
from collections.abc import Awaitable, Callable

import structlog

from shared.geo import Location
from shared.settings import get_settings
from tracking.exceptions import LocationPushError, LocationUnavailable, TrackingUnavailable
from tracking.gateway.port import DeliveryTracking, TrackingGateway
from tracking.locator import DeviceLocator
from tracking.snapshot import TrackingSnapshot, awaiting_assignment, derive_snapshot, loading

logger = structlog.get_logger(__name__)

Sleep = Callable[[float], Awaitable[None]]

_CLOSED = object()


class TrackingSubscription:
    """Running loops for one screen plus the stream of snapshots they produce.

    Iterate with ``async for`` to receive snapshots; ``latest`` always holds the
    most recent one. ``cancel()`` stops every loop and ends the stream.

    Only the newest unread snapshot is kept, so a reader that falls behind (or
    only ever reads ``latest``) skips stale snapshots instead of piling them up.
    """

    def __init__(self, order_id: str | None = None, driver_id: str | None = None) -> None:
        self.order_id = order_id
        self.driver_id = driver_id
        self.latest: TrackingSnapshot = loading(order_id)
        self.customer_location: Location | None = None
        self.driver_location: Location | None = None
        self.location_error: str | None = None
        self._tasks: list[asyncio.Task] = []
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=2)
        self._closed = False
        self._drained = False

    @property
    def active(self) -> bool:
        return not self._closed

    @property
    def tasks(self) -> tuple[asyncio.Task, ...]:
        return tuple(self._tasks)

    def _attach(self, task: asyncio.Task) -> None:
        self._tasks.append(task)

    def publish(self, snapshot: TrackingSnapshot) -> None:
        if self._closed:
            return
        self.latest = snapshot
        # At most one unread snapshot; room is always left for the close marker
        while not self._queue.empty():
            self._queue.get_nowait()
        self._queue.put_nowait(snapshot)

    def cancel(self) -> None:
        """Stop every loop of this subscription. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        try:
            current = asyncio.current_task()
        except RuntimeError:
            current = None
        for task in self._tasks:
            if task is not current and not task.done():
                task.cancel()
        self._queue.put_nowait(_CLOSED)
        logger.debug("tracking.subscription_cancelled", order_id=self.order_id, driver_id=self.driver_id)

    async def wait_closed(self) -> None:
        await asyncio.gather(*self._tasks, return_exceptions=True)

    async def aclose(self) -> None:
        self.cancel()
        await self.wait_closed()

    def __aiter__(self):
        return self

    async def __anext__(self) -> TrackingSnapshot:
        if self._drained:
            raise StopAsyncIteration
        item = await self._queue.get()
        if item is _CLOSED:
            self._drained = True
            raise StopAsyncIteration
        return item


class TrackingReconciler:
    def __init__(
        self,
        gateway: TrackingGateway,
        locator: DeviceLocator,
        poll_interval: float | None = None,
        push_interval: float | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        settings = get_settings()
        self._gateway = gateway
        self._locator = locator
        self._sleep = sleep
        self.poll_interval = settings.tracking_poll_seconds if poll_interval is None else poll_interval
        self.push_interval = settings.location_push_seconds if push_interval is None else push_interval

    # -------------------------------------------------------------------
    # Subscriptions
    # -------------------------------------------------------------------
    def track_order(self, order_id: str) -> TrackingSubscription:
        """Start the customer's tracking loop. Must be called inside a running event loop."""
        subscription = TrackingSubscription(order_id=order_id)
        subscription._attach(asyncio.create_task(self._customer_loop(subscription), name=f"track-order-{order_id}"))
        logger.info("tracking.customer_started", order_id=order_id, poll_interval=self.poll_interval)
        return subscription

    def drive(self, driver_id: str) -> TrackingSubscription:
        """Start the driver's push loop and delivery view loop."""
        subscription = TrackingSubscription(driver_id=driver_id)
        subscription._attach(asyncio.create_task(self._push_loop(subscription), name=f"push-location-{driver_id}"))
        subscription._attach(asyncio.create_task(self._driver_view_loop(subscription), name=f"driver-view-{driver_id}"))
        logger.info(
            "tracking.driver_started",
            driver_id=driver_id,
            push_interval=self.push_interval,
            poll_interval=self.poll_interval,
        )
        return subscription

    # -------------------------------------------------------------------
    # Loops
    # -------------------------------------------------------------------
    async def _customer_loop(self, subscription: TrackingSubscription) -> None:
        while True:
            snapshot = await self._poll_order(subscription)
            subscription.publish(snapshot)
            if snapshot.is_terminal:
                logger.info("tracking.delivered", order_id=subscription.order_id)
                subscription.cancel()
                return
            await self._sleep(self.poll_interval)

    async def _driver_view_loop(self, subscription: TrackingSubscription) -> None:
        while True:
            snapshot = await self._poll_driver_delivery(subscription)
            subscription.publish(snapshot)
            if snapshot.is_terminal:
                logger.info("tracking.delivered", order_id=subscription.order_id, driver_id=subscription.driver_id)
                subscription.cancel()
                return
            await self._sleep(self.poll_interval)

    async def _push_loop(self, subscription: TrackingSubscription) -> None:
        while True:
            location = await self._sample_location(subscription)
            if location is not None:
                subscription.driver_location = location
                await self._push(subscription.driver_id, location)
            await self._sleep(self.push_interval)

    # -------------------------------------------------------------------
    # Ticks
    # -------------------------------------------------------------------
    async def _sample_location(self, subscription: TrackingSubscription) -> Location | None:
        try:
            location = await self._locator.current_location()
        except LocationUnavailable as exc:
            logger.warning("tracking.location_unavailable", reason=exc.reason)
            subscription.location_error = exc.reason
            return None
        subscription.location_error = None
        return location

    async def _push(self, driver_id: str, location: Location) -> None:
        try:
            await self._gateway.push_location(driver_id, location)
        except LocationPushError as exc:
            logger.warning("tracking.location_push_failed", driver_id=driver_id, error=str(exc))
        except Exception:
            logger.error("tracking.location_push_crashed", driver_id=driver_id, exc_info=True)

    def _degraded(self, subscription: TrackingSubscription, exc: TrackingUnavailable, customer: Location | None):
        if exc.not_found:
            logger.info("tracking.awaiting_assignment", order_id=subscription.order_id, reason=exc.reason)
        else:
            logger.warning("tracking.fetch_failed", order_id=subscription.order_id, reason=exc.reason)
        return awaiting_assignment(
            subscription.order_id,
            customer,
            last_error=exc.reason,
            location_error=subscription.location_error,
        )

    async def _poll_order(self, subscription: TrackingSubscription) -> TrackingSnapshot:
        location = await self._sample_location(subscription)
        if location is not None:
            subscription.customer_location = location

        try:
            tracking = await self._gateway.fetch_tracking(subscription.order_id)
        except TrackingUnavailable as exc:
            return self._degraded(subscription, exc, subscription.customer_location)
        except Exception as exc:
            logger.error("tracking.fetch_crashed", order_id=subscription.order_id, exc_info=True)
            return awaiting_assignment(
                subscription.order_id,
                subscription.customer_location,
                last_error=str(exc),
                location_error=subscription.location_error,
            )

        return derive_snapshot(
            tracking,
            customer=subscription.customer_location,
            location_error=subscription.location_error,
        )

    async def _poll_driver_delivery(self, subscription: TrackingSubscription) -> TrackingSnapshot:
        try:
            delivery = await self._gateway.fetch_driver_delivery(subscription.driver_id)
        except TrackingUnavailable as exc:
            return self._degraded(subscription, exc, None)
        except Exception as exc:
            logger.error("tracking.driver_delivery_crashed", driver_id=subscription.driver_id, exc_info=True)
            return awaiting_assignment(
                subscription.order_id, None, last_error=str(exc), location_error=subscription.location_error
            )

        subscription.order_id = delivery.order_id
        tracking = DeliveryTracking(
            order_id=delivery.order_id,
            is_delivered=delivery.is_delivered,
            driver_latitude=delivery.driver_latitude,
            driver_longitude=delivery.driver_longitude,
            customer_latitude=delivery.destination_latitude,
            customer_longitude=delivery.destination_longitude,
        )
        return derive_snapshot(
            tracking,
            driver=subscription.driver_location,
            shop=delivery.shop_location,
            location_error=subscription.location_error,
        )
