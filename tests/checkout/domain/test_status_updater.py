"""Tests for the client-side status updater against the fake order gateway."""

import asyncio
from dataclasses import replace

import pytest
from checkout.cart import CartGroup
from checkout.draft import DeliveryDetails, OrderDraft
from checkout.exceptions import InvalidTransitionError, OrderGatewayError, TransitionRejected
from checkout.status import StatusUpdater
from shared.order_lifecycle import OrderStatus


def _placed_order(gateway):
    group = CartGroup.from_payload("r-1", [{"foodId": "a", "quantity": 1, "price": 10}])
    details = DeliveryDetails(user_id="42", delivery_address="1 High St", contact_phone="555-0100")
    return asyncio.run(gateway.create_order(OrderDraft.from_group(group), details))


def _update(gateway, order, to_status):
    return asyncio.run(StatusUpdater(gateway).update(order, to_status))


class TestStatusUpdater:
    def test_legal_update_returns_backend_record(self, gateway):
        order = _placed_order(gateway)
        updated = _update(gateway, order, OrderStatus.CONFIRMED)

        assert updated.status is OrderStatus.CONFIRMED
        assert gateway.orders[order.order_id].status is OrderStatus.CONFIRMED

    def test_wire_value_target_accepted(self, gateway):
        order = _placed_order(gateway)
        assert _update(gateway, order, "CANCELLED").status is OrderStatus.CANCELLED

    def test_illegal_update_is_never_sent(self, gateway):
        order = _placed_order(gateway)
        with pytest.raises(InvalidTransitionError) as exc:
            _update(gateway, order, OrderStatus.DELIVERED)

        assert exc.value.to_status is OrderStatus.DELIVERED
        assert [c for c in gateway.calls if c["method"] == "update_status"] == []

    def test_unknown_current_status_blocks_every_update(self, gateway):
        order = replace(_placed_order(gateway), status=None, raw_status="ON_HOLD")
        with pytest.raises(InvalidTransitionError):
            _update(gateway, order, OrderStatus.CONFIRMED)

    def test_backend_rejection_surfaces(self, gateway):
        order = _placed_order(gateway)
        # Client copy is stale: the backend already moved the order on
        asyncio.run(gateway.update_status(order.order_id, OrderStatus.CANCELLED))

        with pytest.raises(TransitionRejected) as exc:
            _update(gateway, order, OrderStatus.CONFIRMED)
        assert exc.value.order_id == order.order_id
        assert "CANCELLED" in exc.value.reason

    def test_transport_failure_surfaces(self, gateway):
        order = _placed_order(gateway)
        gateway.configure(should_succeed=False)
        with pytest.raises(OrderGatewayError):
            _update(gateway, order, OrderStatus.CONFIRMED)
