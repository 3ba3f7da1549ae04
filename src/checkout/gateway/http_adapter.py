"""Order gateway over the ordering service's REST API (httpx)."""

import httpx
import structlog

from checkout.draft import DeliveryDetails, Order, OrderDraft
from checkout.exceptions import OrderGatewayError, TransitionRejected
from checkout.gateway.port import OrderGateway
from shared.order_lifecycle import OrderStatus

logger = structlog.get_logger(__name__)


def error_detail(response: httpx.Response) -> str:
    """Best-effort human-readable reason from an error response."""
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    detail = body.get("detail", body) if isinstance(body, dict) else body
    if isinstance(detail, dict):
        return "; ".join(f"{field}: {', '.join(map(str, msgs))}" for field, msgs in detail.items())
    return str(detail)


class HttpOrderGateway(OrderGateway):
    def __init__(self, base_url: str, timeout: float = 10.0, client: httpx.AsyncClient | None = None) -> None:
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            return await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("order_gateway.transport_error", method=method, url=url, error=str(exc))
            raise OrderGatewayError(f"{method} {url} failed: {exc}") from exc

    def _order_from(self, response: httpx.Response) -> Order:
        if not response.is_success:
            raise OrderGatewayError(error_detail(response), status_code=response.status_code)
        try:
            return Order.from_payload(response.json())
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.warning("order_gateway.malformed_response", status_code=response.status_code, error=str(exc))
            raise OrderGatewayError(
                f"Malformed order response: {exc!r}", status_code=response.status_code
            ) from exc

    async def create_order(self, draft: OrderDraft, details: DeliveryDetails) -> Order:
        response = await self._request("POST", "/orders", json=draft.to_payload(details))
        return self._order_from(response)

    async def update_status(self, order_id: str, status: OrderStatus) -> Order:
        response = await self._request("PATCH", f"/orders/{order_id}/status", json={"status": status.value})
        if response.status_code in (400, 409):
            raise TransitionRejected(order_id, status, error_detail(response))
        return self._order_from(response)

    async def get_order(self, order_id: str) -> Order:
        response = await self._request("GET", f"/orders/{order_id}")
        return self._order_from(response)

    async def aclose(self) -> None:
        await self._client.aclose()
