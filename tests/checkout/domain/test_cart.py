"""Tests for cart lines, groups and flat-list grouping."""

from decimal import Decimal

import pytest
from checkout.cart import CartGroup, CartLine, clear_cart, group_cart_items, load_cart, save_cart
from checkout.store import CART_KEY, InMemoryStore


class TestCartLine:
    def test_from_dict_accepts_catalogue_spelling(self):
        line = CartLine.from_dict({"foodId": 7, "name": "Pad Thai", "quantity": 2, "price": 9.5})
        assert line.food_item_id == "7"
        assert line.food_name == "Pad Thai"
        assert line.unit_price == Decimal("9.5")

    def test_from_dict_accepts_canonical_spelling(self):
        line = CartLine.from_dict({"foodItemId": "f-1", "foodName": "Ramen", "quantity": 1, "unitPrice": "12.00"})
        assert line.food_item_id == "f-1"
        assert line.unit_price == Decimal("12.00")

    def test_line_total(self):
        assert CartLine("f", "x", 3, Decimal("0.10")).line_total == Decimal("0.30")

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_non_positive_quantity_rejected(self, quantity):
        with pytest.raises(ValueError):
            CartLine("f", "x", quantity, Decimal("1.00"))

    def test_negative_price_rejected(self):
        with pytest.raises(ValueError):
            CartLine("f", "x", 1, Decimal("-0.01"))

    def test_free_item_allowed(self):
        assert CartLine("f", "x", 1, Decimal("0")).line_total == Decimal("0")

    def test_missing_price_rejected(self):
        with pytest.raises(ValueError):
            CartLine.from_dict({"foodId": "f", "quantity": 1})

    @pytest.mark.parametrize("quantity", [2.7, "1.5", "two", float("nan")])
    def test_fractional_quantity_rejected(self, quantity):
        with pytest.raises(ValueError):
            CartLine.from_dict({"foodId": "f", "quantity": quantity, "price": 3})

    @pytest.mark.parametrize("quantity", [2, 2.0, "2"])
    def test_whole_quantity_accepted(self, quantity):
        assert CartLine.from_dict({"foodId": "f", "quantity": quantity, "price": 3}).quantity == 2

    def test_to_dict(self):
        line = CartLine("f-1", "Ramen", 2, Decimal("12.00"))
        assert line.to_dict() == {"foodItemId": "f-1", "foodName": "Ramen", "quantity": 2, "unitPrice": 12.0}


class TestCartGroup:
    def test_total_price(self):
        group = CartGroup.from_payload(
            "r-1",
            {"restaurantName": "Luigi's", "items": [{"foodId": "a", "quantity": 2, "price": 10}, {"foodId": "b", "quantity": 1, "price": 2.5}]},
        )
        assert group.restaurant_name == "Luigi's"
        assert group.total_price == Decimal("22.5")

    def test_plain_list_payload_gets_default_name(self):
        group = CartGroup.from_payload("r-9", [{"foodId": "a", "quantity": 1, "price": 1}])
        assert group.restaurant_name == "Restaurant r-9"

    def test_group_without_lines_rejected(self):
        with pytest.raises(ValueError):
            CartGroup.from_payload("r-1", {"items": []})


class TestGroupCartItems:
    def test_flat_list_grouped_in_first_appearance_order(self):
        items = [
            {"restaurantId": "r-2", "restaurantName": "Second", "foodId": "a", "quantity": 1, "price": 5},
            {"restaurantId": "r-1", "foodId": "b", "quantity": 2, "price": 3},
            {"restaurantId": "r-2", "foodId": "c", "quantity": 1, "price": 1.25},
        ]
        groups = group_cart_items(items)

        assert list(groups) == ["r-2", "r-1"]
        assert groups["r-2"]["restaurantName"] == "Second"
        assert groups["r-2"]["totalPrice"] == 6.25
        assert groups["r-1"]["restaurantName"] == "Restaurant r-1"
        assert len(groups["r-2"]["items"]) == 2

    def test_lines_without_restaurant_go_under_null(self):
        groups = group_cart_items([{"foodId": "a", "quantity": 1, "price": 5}])
        assert list(groups) == ["null"]

    def test_grouped_mapping_passes_through(self):
        cart = {"r-1": {"items": []}}
        assert group_cart_items(cart) is cart


class TestCartPersistence:
    def test_save_load_clear(self):
        store = InMemoryStore()
        save_cart(store, [{"restaurantId": "r-1", "foodId": "a", "quantity": 1, "price": 5}])
        assert list(load_cart(store)) == ["r-1"]

        clear_cart(store)
        assert load_cart(store) == {}
        assert store.get(CART_KEY) is None
