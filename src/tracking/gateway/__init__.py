"""Tracking gateway abstraction — pluggable Tracking-Fetch / Location-Push collaborator."""

from shared.settings import get_settings
from tracking.gateway.port import TrackingGateway

_gateway_instance: TrackingGateway | None = None


def get_gateway() -> TrackingGateway:
    """Return the configured tracking gateway (singleton).

    Uses FakeTrackingGateway by default. Set TRACKING_GATEWAY=http to talk to
    the delivery service at FOOD_API_BASE_URL.
    """
    global _gateway_instance
    if _gateway_instance is None:
        settings = get_settings()
        if settings.tracking_gateway == "fake":
            from tracking.gateway.fake_adapter import FakeTrackingGateway

            _gateway_instance = FakeTrackingGateway()
        elif settings.tracking_gateway == "http":
            from tracking.gateway.http_adapter import HttpTrackingGateway

            _gateway_instance = HttpTrackingGateway(settings.api_base_url, timeout=settings.http_timeout_seconds)
        else:
            raise ValueError(f"Unknown tracking gateway: {settings.tracking_gateway}")
    return _gateway_instance


def set_gateway(gateway: TrackingGateway) -> None:
    """Override the gateway (for testing)."""
    global _gateway_instance
    _gateway_instance = gateway


def reset_gateway() -> None:
    """Reset the gateway singleton (useful for testing)."""
    global _gateway_instance
    _gateway_instance = None
