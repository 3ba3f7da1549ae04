"""Order gateway abstraction — pluggable Order-Create / Order-Status-Update collaborator."""

from checkout.gateway.port import OrderGateway
from shared.settings import get_settings

_gateway_instance: OrderGateway | None = None


def get_gateway() -> OrderGateway:
    """Return the configured order gateway (singleton).

    Uses FakeOrderGateway by default. Set ORDER_GATEWAY=http to talk to the
    ordering service at FOOD_API_BASE_URL.
    """
    global _gateway_instance
    if _gateway_instance is None:
        settings = get_settings()
        if settings.order_gateway == "fake":
            from checkout.gateway.fake_adapter import FakeOrderGateway

            _gateway_instance = FakeOrderGateway()
        elif settings.order_gateway == "http":
            from checkout.gateway.http_adapter import HttpOrderGateway

            _gateway_instance = HttpOrderGateway(settings.api_base_url, timeout=settings.http_timeout_seconds)
        else:
            raise ValueError(f"Unknown order gateway: {settings.order_gateway}")
    return _gateway_instance


def set_gateway(gateway: OrderGateway) -> None:
    """Override the gateway (for testing)."""
    global _gateway_instance
    _gateway_instance = gateway


def reset_gateway() -> None:
    """Reset the gateway singleton (useful for testing)."""
    global _gateway_instance
    _gateway_instance = None
