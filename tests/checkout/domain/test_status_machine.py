"""Tests for the advisory order status machine."""

import itertools

import pytest
from checkout.status import allowed_next, validate_transition
from shared.order_lifecycle import TERMINAL_STATUSES, TRANSITIONS, OrderStatus, parse_status


class TestAllowedNext:
    @pytest.mark.parametrize("status", [OrderStatus.DELIVERED, OrderStatus.CANCELLED])
    def test_terminal_statuses_have_no_successors(self, status):
        assert allowed_next(status) == []

    def test_terminal_set(self):
        assert TERMINAL_STATUSES == {OrderStatus.DELIVERED, OrderStatus.CANCELLED}

    def test_table(self):
        assert allowed_next(OrderStatus.PLACED) == [OrderStatus.CONFIRMED, OrderStatus.CANCELLED]
        assert allowed_next(OrderStatus.CONFIRMED) == [OrderStatus.PREPARING, OrderStatus.CANCELLED]
        assert allowed_next(OrderStatus.PREPARING) == [OrderStatus.OUT_FOR_DELIVERY, OrderStatus.CANCELLED]
        assert allowed_next(OrderStatus.OUT_FOR_DELIVERY) == [OrderStatus.DELIVERED, OrderStatus.CANCELLED]

    def test_wire_values_accepted(self):
        assert allowed_next("PLACED") == [OrderStatus.CONFIRMED, OrderStatus.CANCELLED]

    @pytest.mark.parametrize("status", ["SHIPPED", "", None, 7])
    def test_unknown_status_maps_to_empty(self, status):
        assert allowed_next(status) == []


@pytest.mark.parametrize("source,target", list(itertools.product(OrderStatus, OrderStatus)))
def test_validate_matches_allowed_next(source, target):
    assert validate_transition(source, target) == (target in allowed_next(source))


def test_every_status_has_a_table_row():
    assert set(TRANSITIONS) == set(OrderStatus)


def test_unknown_target_is_invalid():
    assert validate_transition(OrderStatus.PLACED, "TELEPORTED") is False


def test_parse_status():
    assert parse_status("CONFIRMED") is OrderStatus.CONFIRMED
    assert parse_status(OrderStatus.CONFIRMED) is OrderStatus.CONFIRMED
    assert parse_status("confirmed") is None
