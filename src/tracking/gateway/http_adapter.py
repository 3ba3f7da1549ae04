"""Tracking gateway over the delivery service's REST API (httpx)."""

import httpx
import structlog

from shared.geo import Location
from tracking.exceptions import LocationPushError, TrackingUnavailable
from tracking.gateway.port import DeliveryTracking, DriverDelivery, TrackingGateway

logger = structlog.get_logger(__name__)


class HttpTrackingGateway(TrackingGateway):
    def __init__(self, base_url: str, timeout: float = 10.0, client: httpx.AsyncClient | None = None) -> None:
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def _get(self, url: str, order_id: str | None) -> dict:
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as exc:
            raise TrackingUnavailable(order_id, str(exc), not_found=False) from exc
        if response.status_code == 404:
            raise TrackingUnavailable(order_id, "No delivery assigned yet")
        if not response.is_success:
            raise TrackingUnavailable(order_id, f"HTTP {response.status_code}", not_found=False)
        try:
            body = response.json()
        except ValueError as exc:
            raise TrackingUnavailable(order_id, f"Malformed tracking response: {exc}", not_found=False) from exc
        if not body:
            raise TrackingUnavailable(order_id, "Empty tracking response")
        return body

    async def fetch_tracking(self, order_id: str) -> DeliveryTracking:
        return DeliveryTracking.from_payload(await self._get(f"/delivery/{order_id}", order_id))

    async def fetch_driver_delivery(self, driver_id: str) -> DriverDelivery:
        return DriverDelivery.from_payload(await self._get(f"/delivery/by-driver/{driver_id}", None))

    async def push_location(self, driver_id: str, location: Location) -> None:
        payload = {"driverId": driver_id, **location.to_payload()}
        try:
            response = await self._client.post("/delivery/update-location", json=payload)
        except httpx.HTTPError as exc:
            raise LocationPushError(f"Location push failed: {exc}") from exc
        if not response.is_success:
            raise LocationPushError(f"Location push rejected with HTTP {response.status_code}")
        logger.debug("tracking.location_pushed", driver_id=driver_id)

    async def aclose(self) -> None:
        await self._client.aclose()
