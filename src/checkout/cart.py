"""Cart model — lines grouped per restaurant, as persisted by the cart screen.

The persisted cart is a mapping ``restaurantId -> group``. A group is either a
plain list of lines or ``{"restaurantName": ..., "items": [...], "totalPrice": ...}``.
Lines accept the field spellings the catalogue screens emit (``foodId`` or
``foodItemId``, ``price`` or ``unitPrice``).
"""

from dataclasses import dataclass
from decimal import Decimal

from checkout.pricing import round2, to_decimal
from checkout.store import CART_KEY, KeyValueStore


@dataclass(frozen=True)
class CartLine:
    food_item_id: str
    food_name: str
    quantity: int
    unit_price: Decimal

    def __post_init__(self):
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int) or self.quantity <= 0:
            raise ValueError(f"Cart line quantity must be a positive integer, got {self.quantity!r}")
        if self.unit_price < 0:
            raise ValueError(f"Cart line price must not be negative, got {self.unit_price}")

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    @classmethod
    def from_dict(cls, data: dict) -> "CartLine":
        food_item_id = _first(data, "foodItemId", "foodId", "menuItemId", "id")
        quantity = _first(data, "quantity", "qty")
        price = _first(data, "unitPrice", "price")
        if quantity is None or price is None:
            raise ValueError(f"Cart line is missing quantity or price: {data!r}")
        return cls(
            food_item_id="" if food_item_id is None else str(food_item_id),
            food_name=str(_first(data, "foodName", "name", "itemName") or ""),
            quantity=_whole_quantity(quantity),
            unit_price=to_decimal(price),
        )

    def to_dict(self) -> dict:
        return {
            "foodItemId": self.food_item_id,
            "foodName": self.food_name,
            "quantity": self.quantity,
            "unitPrice": float(self.unit_price),
        }


def _whole_quantity(value) -> int:
    """Accept 2, 2.0 or "2"; a fractional count such as 2.7 is an error, not a truncation."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    try:
        amount = to_decimal(value)
    except (ArithmeticError, ValueError) as exc:
        raise ValueError(f"Cart line quantity must be a whole number, got {value!r}") from exc
    if not amount.is_finite() or amount != amount.to_integral_value():
        raise ValueError(f"Cart line quantity must be a whole number, got {value!r}")
    return int(amount)


@dataclass(frozen=True)
class CartGroup:
    restaurant_id: str
    restaurant_name: str
    lines: tuple[CartLine, ...]

    def __post_init__(self):
        if not self.lines:
            raise ValueError(f"Cart group {self.restaurant_id} has no lines")

    @property
    def total_price(self) -> Decimal:
        return sum((line.line_total for line in self.lines), Decimal("0"))

    @classmethod
    def from_payload(cls, restaurant_id: str, payload) -> "CartGroup":
        if isinstance(payload, dict):
            raw_lines = payload.get("items") or payload.get("lines") or []
            name = payload.get("restaurantName")
        else:
            raw_lines = payload or []
            name = None
        return cls(
            restaurant_id=str(restaurant_id),
            restaurant_name=name or f"Restaurant {restaurant_id}",
            lines=tuple(CartLine.from_dict(line) for line in raw_lines),
        )


def _first(data: dict, *keys):
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


def group_cart_items(items) -> dict:
    """Group cart lines by restaurant, keeping first-appearance order.

    Accepts an already grouped mapping (returned unchanged) or a flat list of
    line dicts each carrying ``restaurantId`` and optionally ``restaurantName``.
    Lines with no restaurant land under the ``"null"`` key, which checkout skips.
    """
    if isinstance(items, dict):
        return items

    groups: dict[str, dict] = {}
    for item in items:
        rid = item.get("restaurantId")
        key = "null" if rid is None else str(rid)
        group = groups.setdefault(
            key,
            {"restaurantName": item.get("restaurantName") or f"Restaurant {key}", "items": [], "totalPrice": 0.0},
        )
        group["items"].append(item)
        line = CartLine.from_dict(item)
        group["totalPrice"] = float(round2(to_decimal(group["totalPrice"]) + line.line_total))
    return groups


def load_cart(store: KeyValueStore) -> dict:
    return store.get(CART_KEY) or {}


def save_cart(store: KeyValueStore, cart) -> None:
    store.set(CART_KEY, group_cart_items(cart))


def clear_cart(store: KeyValueStore) -> None:
    store.clear(CART_KEY)
