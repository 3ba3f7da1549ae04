"""Pydantic API schemas for the Ordering domain.

These are the external API contracts — separate from domain commands.
Field names travel in camelCase on the wire, as the web client sends them.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from shared.order_lifecycle import OrderStatus


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------
class OrderItemSchema(CamelModel):
    menu_item_id: str
    item_name: str = ""
    quantity: int = Field(ge=1)
    unit_price: float = Field(ge=0)
    total_price: float | None = None


class PlaceOrderRequest(CamelModel):
    user_id: str | None = None
    restaurant_id: str
    order_items: list[OrderItemSchema]
    delivery_address: str = ""
    contact_phone: str = ""
    subtotal: float | None = None
    tax: float = 0.0
    delivery_fee: float = 0.0
    total_amount: float | None = None
    latitude: float | None = None
    longitude: float | None = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "userId": "42",
                    "restaurantId": "r-1",
                    "orderItems": [
                        {"menuItemId": "f-7", "itemName": "Margherita", "quantity": 2, "unitPrice": 10.0},
                    ],
                    "tax": 2.0,
                    "deliveryFee": 5.0,
                    "deliveryAddress": "221B Baker Street",
                    "contactPhone": "+44 20 7946 0000",
                    "latitude": 51.5237,
                    "longitude": -0.1585,
                }
            ]
        },
    )


class UpdateStatusRequest(CamelModel):
    status: OrderStatus


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------
class OrderResponse(CamelModel):
    order_id: str
    user_id: str | None = None
    restaurant_id: str
    status: str
    order_items: list[OrderItemSchema]
    subtotal: float
    tax: float
    delivery_fee: float
    total_amount: float
    delivery_address: str
    contact_phone: str
    latitude: float | None = None
    longitude: float | None = None
    order_date: datetime | None = None
    last_updated: datetime | None = None
    allowed_next: list[str] = []
