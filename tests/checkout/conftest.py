import pytest
from checkout.draft import DeliveryDetails
from checkout.gateway.fake_adapter import FakeOrderGateway
from checkout.store import CART_KEY, InMemoryStore


def _cart_of(*groups):
    """Build a persisted cart from ``(restaurant_id, [(qty, price), ...])`` pairs."""
    return {
        rid: {
            "restaurantName": f"Kitchen {rid}",
            "items": [
                {"foodId": f"{rid}-f{i}", "foodName": f"Dish {i}", "quantity": qty, "price": price}
                for i, (qty, price) in enumerate(lines)
            ],
        }
        for rid, lines in groups
    }


@pytest.fixture()
def cart_of():
    return _cart_of


@pytest.fixture()
def three_restaurant_cart():
    return _cart_of(
        ("r-1", [(2, 10.00)]),
        ("r-2", [(1, 25.50)]),
        ("r-3", [(3, 4.00)]),
    )


@pytest.fixture()
def store(three_restaurant_cart):
    return InMemoryStore({CART_KEY: three_restaurant_cart})


@pytest.fixture()
def gateway():
    return FakeOrderGateway()


@pytest.fixture()
def details():
    return DeliveryDetails(
        user_id="42",
        delivery_address="221B Baker Street",
        contact_phone="555-0100",
        latitude=51.5237,
        longitude=-0.1585,
    )
