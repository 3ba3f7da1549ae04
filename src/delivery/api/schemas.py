"""Pydantic API schemas for the Delivery domain.

These are the external API contracts — separate from domain commands.
Field names travel in camelCase on the wire.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------
class RegisterDriverRequest(CamelModel):
    driver_id: str
    name: str | None = None


class LocationUpdateRequest(CamelModel):
    driver_id: str
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class CreateDeliveryRequest(CamelModel):
    order_id: str
    shop_latitude: float = 0.0
    shop_longitude: float = 0.0
    destination_latitude: float
    destination_longitude: float


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------
class StatusResponse(CamelModel):
    status: str


class DriverResponse(CamelModel):
    driver_id: str
    name: str


class DeliveryCreatedResponse(CamelModel):
    delivery_id: str
    order_id: str
    driver_id: str | None = None


class AssignmentResponse(CamelModel):
    order_id: str
    driver_id: str | None = None


class TrackingResponse(CamelModel):
    order_id: str
    is_delivered: bool
    driver_name: str
    driver_latitude: float
    driver_longitude: float
    customer_latitude: float
    customer_longitude: float
    estimated_arrival: str


class DriverDeliveryResponse(CamelModel):
    order_id: str
    is_delivered: bool
    shop_latitude: float
    shop_longitude: float
    destination_latitude: float
    destination_longitude: float
    driver_latitude: float
    driver_longitude: float
