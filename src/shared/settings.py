"""Runtime settings for the client core, read once from the environment."""

import os
from dataclasses import dataclass

DEFAULT_API_BASE_URL = "http://localhost:8082/api/v1"

_settings_instance = None


@dataclass(frozen=True)
class Settings:
    api_base_url: str = DEFAULT_API_BASE_URL
    order_gateway: str = "fake"
    tracking_gateway: str = "fake"
    tracking_poll_seconds: float = 10.0
    location_push_seconds: float = 5.0
    http_timeout_seconds: float = 10.0
    cart_store_path: str | None = None

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            api_base_url=os.environ.get("FOOD_API_BASE_URL", DEFAULT_API_BASE_URL).rstrip("/"),
            order_gateway=os.environ.get("ORDER_GATEWAY", "fake"),
            tracking_gateway=os.environ.get("TRACKING_GATEWAY", "fake"),
            tracking_poll_seconds=float(os.environ.get("TRACKING_POLL_SECONDS", "10")),
            location_push_seconds=float(os.environ.get("LOCATION_PUSH_SECONDS", "5")),
            http_timeout_seconds=float(os.environ.get("HTTP_TIMEOUT_SECONDS", "10")),
            cart_store_path=os.environ.get("CART_STORE_PATH") or None,
        )


def get_settings() -> Settings:
    """Return the process-wide settings (singleton)."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings.from_env()
    return _settings_instance


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings_instance
    _settings_instance = None
