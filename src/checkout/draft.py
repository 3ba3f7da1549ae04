"""Order drafts built from cart groups, and the orders the backend returns."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from checkout.cart import CartGroup
from checkout.pricing import DELIVERY_FEE, round2, tax_for
from shared.order_lifecycle import OrderStatus, parse_status


@dataclass(frozen=True)
class OrderItem:
    menu_item_id: str
    item_name: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal

    def to_payload(self) -> dict:
        return {
            "menuItemId": self.menu_item_id,
            "itemName": self.item_name,
            "quantity": self.quantity,
            "unitPrice": float(self.unit_price),
            "totalPrice": float(self.total_price),
        }

    @classmethod
    def from_payload(cls, data: dict) -> "OrderItem":
        return cls(
            menu_item_id=str(data.get("menuItemId") or ""),
            item_name=data.get("itemName") or "",
            quantity=int(data["quantity"]),
            unit_price=round2(data["unitPrice"]),
            total_price=round2(data.get("totalPrice", 0)),
        )


@dataclass(frozen=True)
class DeliveryDetails:
    """Customer context captured on the checkout screen."""

    user_id: str
    delivery_address: str
    contact_phone: str
    latitude: float | None = None
    longitude: float | None = None


@dataclass(frozen=True)
class OrderDraft:
    restaurant_id: str
    restaurant_name: str
    items: tuple[OrderItem, ...]
    subtotal: Decimal
    tax: Decimal
    delivery_fee: Decimal
    total_amount: Decimal

    @classmethod
    def from_group(cls, group: CartGroup) -> "OrderDraft":
        items = tuple(
            OrderItem(
                menu_item_id=line.food_item_id,
                item_name=line.food_name,
                quantity=line.quantity,
                unit_price=round2(line.unit_price),
                total_price=round2(line.line_total),
            )
            for line in group.lines
        )
        subtotal = round2(group.total_price)
        tax = tax_for(subtotal)
        return cls(
            restaurant_id=group.restaurant_id,
            restaurant_name=group.restaurant_name,
            items=items,
            subtotal=subtotal,
            tax=tax,
            delivery_fee=DELIVERY_FEE,
            total_amount=subtotal + tax + DELIVERY_FEE,
        )

    def to_payload(self, details: DeliveryDetails) -> dict:
        payload = {
            "userId": details.user_id,
            "restaurantId": self.restaurant_id,
            "orderItems": [item.to_payload() for item in self.items],
            "subtotal": float(self.subtotal),
            "tax": float(self.tax),
            "deliveryFee": float(self.delivery_fee),
            "totalAmount": float(self.total_amount),
            "deliveryAddress": details.delivery_address,
            "contactPhone": details.contact_phone,
        }
        if details.latitude is not None and details.longitude is not None:
            payload["latitude"] = round(details.latitude, 6)
            payload["longitude"] = round(details.longitude, 6)
        return payload


@dataclass(frozen=True)
class Order:
    """An order as recorded by the backend."""

    order_id: str
    restaurant_id: str
    status: OrderStatus | None
    raw_status: str
    items: tuple[OrderItem, ...] = ()
    subtotal: Decimal = Decimal("0.00")
    tax: Decimal = Decimal("0.00")
    delivery_fee: Decimal = Decimal("0.00")
    total_amount: Decimal = Decimal("0.00")
    user_id: str | None = None
    delivery_address: str | None = None
    contact_phone: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    order_date: datetime | None = None
    last_updated: datetime | None = None

    @classmethod
    def from_payload(cls, data: dict) -> "Order":
        raw_status = str(data.get("status") or "")
        return cls(
            order_id=str(data["orderId"]),
            restaurant_id=str(data.get("restaurantId") or ""),
            status=parse_status(raw_status),
            raw_status=raw_status,
            items=tuple(OrderItem.from_payload(item) for item in data.get("orderItems") or []),
            subtotal=round2(data.get("subtotal") or 0),
            tax=round2(data.get("tax") or 0),
            delivery_fee=round2(data.get("deliveryFee") or 0),
            total_amount=round2(data.get("totalAmount") or 0),
            user_id=data.get("userId"),
            delivery_address=data.get("deliveryAddress"),
            contact_phone=data.get("contactPhone"),
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
            order_date=_parse_datetime(data.get("orderDate")),
            last_updated=_parse_datetime(data.get("lastUpdated")),
        )


def _parse_datetime(value) -> datetime | None:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
