"""Application tests for drivers, assignment and tracking reads via domain.process()."""

import pytest
from delivery.delivery.assignment import AssignDriver, CreateDelivery, MarkDelivered
from delivery.delivery.delivery import Delivery, DeliveryStatus
from delivery.delivery.tracking import delivery_for_driver, tracking_for_order
from delivery.driver.driver import Driver
from delivery.driver.location import RegisterDriver, UpdateDriverLocation
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError

SHOP = (51.5074, -0.1278)
CUSTOMER = (51.5155, -0.0922)


def _driver_at(driver_id, latitude, longitude, name=None):
    current_domain.process(RegisterDriver(driver_id=driver_id, name=name), asynchronous=False)
    current_domain.process(
        UpdateDriverLocation(driver_id=driver_id, latitude=latitude, longitude=longitude),
        asynchronous=False,
    )


def _create_delivery(order_id="ord-1"):
    delivery_id = current_domain.process(
        CreateDelivery(
            order_id=order_id,
            shop_latitude=SHOP[0],
            shop_longitude=SHOP[1],
            destination_latitude=CUSTOMER[0],
            destination_longitude=CUSTOMER[1],
        ),
        asynchronous=False,
    )
    return current_domain.repository_for(Delivery).get(delivery_id)


class TestDrivers:
    def test_register_driver(self):
        current_domain.process(RegisterDriver(driver_id="d-1", name="Sam"), asynchronous=False)
        assert current_domain.repository_for(Driver).get("d-1").name == "Sam"

    def test_duplicate_registration_rejected(self):
        current_domain.process(RegisterDriver(driver_id="d-1"), asynchronous=False)
        with pytest.raises(ValidationError):
            current_domain.process(RegisterDriver(driver_id="d-1"), asynchronous=False)

    def test_location_push_registers_unknown_driver(self):
        current_domain.process(
            UpdateDriverLocation(driver_id="d-new", latitude=51.51, longitude=-0.11),
            asynchronous=False,
        )
        driver = current_domain.repository_for(Driver).get("d-new")
        assert (driver.latitude, driver.longitude) == (51.51, -0.11)

    def test_location_push_overwrites_position(self):
        _driver_at("d-1", 51.50, -0.10)
        current_domain.process(
            UpdateDriverLocation(driver_id="d-1", latitude=51.52, longitude=-0.09),
            asynchronous=False,
        )
        driver = current_domain.repository_for(Driver).get("d-1")
        assert (driver.latitude, driver.longitude) == (51.52, -0.09)


class TestAssignment:
    def test_nearest_available_driver_is_assigned(self):
        _driver_at("far", 51.60, -0.30)
        _driver_at("near", 51.5080, -0.1270)

        dlv = _create_delivery()
        assert dlv.driver_id == "near"
        assert dlv.status == DeliveryStatus.ASSIGNED.value
        assert current_domain.repository_for(Driver).get("near").is_available is False

    def test_busy_driver_is_skipped(self):
        _driver_at("near", 51.5080, -0.1270)
        _driver_at("far", 51.60, -0.30)
        _create_delivery("ord-1")

        second = _create_delivery("ord-2")
        assert second.driver_id == "far"

    def test_drivers_without_position_are_skipped(self):
        current_domain.process(RegisterDriver(driver_id="nowhere"), asynchronous=False)
        dlv = _create_delivery()
        assert dlv.driver_id is None
        assert dlv.status == DeliveryStatus.UNASSIGNED.value

    def test_duplicate_delivery_for_order_rejected(self):
        _create_delivery("ord-1")
        with pytest.raises(ValidationError):
            _create_delivery("ord-1")

    def test_assign_retries_later(self):
        _create_delivery("ord-1")
        _driver_at("d-1", 51.51, -0.12)

        driver_id = current_domain.process(AssignDriver(order_id="ord-1"), asynchronous=False)
        assert driver_id == "d-1"

    def test_assign_unknown_order_not_found(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(AssignDriver(order_id="nope"), asynchronous=False)

    def test_mark_delivered_frees_driver(self):
        _driver_at("d-1", 51.51, -0.12)
        _create_delivery("ord-1")

        order_id = current_domain.process(MarkDelivered(driver_id="d-1"), asynchronous=False)

        assert order_id == "ord-1"
        dlv = current_domain.repository_for(Delivery)._dao.query.filter(order_id="ord-1").all().items[0]
        assert dlv.is_delivered is True
        assert current_domain.repository_for(Driver).get("d-1").is_available is True

    def test_mark_delivered_without_active_delivery(self):
        _driver_at("d-1", 51.51, -0.12)
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(MarkDelivered(driver_id="d-1"), asynchronous=False)


class TestTrackingReads:
    def test_no_delivery_is_not_found(self):
        with pytest.raises(ObjectNotFoundError):
            tracking_for_order("ord-1")

    def test_unassigned_delivery_is_not_found(self):
        _create_delivery("ord-1")
        with pytest.raises(ObjectNotFoundError):
            tracking_for_order("ord-1")

    def test_tracking_carries_driver_and_customer(self):
        _driver_at("d-1", SHOP[0], SHOP[1], name="Sam")
        _create_delivery("ord-1")

        view = tracking_for_order("ord-1")
        assert view.driver_name == "Sam"
        assert (view.driver_latitude, view.driver_longitude) == SHOP
        assert (view.customer_latitude, view.customer_longitude) == CUSTOMER
        assert view.is_delivered is False
        assert view.estimated_arrival == "6 mins"

    def test_delivered_tracking_is_still_readable(self):
        _driver_at("d-1", 51.51, -0.12)
        _create_delivery("ord-1")
        current_domain.process(MarkDelivered(driver_id="d-1"), asynchronous=False)

        view = tracking_for_order("ord-1")
        assert view.is_delivered is True
        assert view.estimated_arrival == ""

    def test_driver_sees_active_delivery(self):
        _driver_at("d-1", 51.51, -0.12)
        _create_delivery("ord-1")

        view = delivery_for_driver("d-1")
        assert view.order_id == "ord-1"
        assert (view.shop_latitude, view.shop_longitude) == SHOP
        assert (view.destination_latitude, view.destination_longitude) == CUSTOMER
        assert (view.driver_latitude, view.driver_longitude) == (51.51, -0.12)

    def test_driver_still_sees_completed_delivery(self):
        _driver_at("d-1", 51.51, -0.12)
        _create_delivery("ord-1")
        current_domain.process(MarkDelivered(driver_id="d-1"), asynchronous=False)

        view = delivery_for_driver("d-1")
        assert view.order_id == "ord-1"
        assert view.is_delivered is True

    def test_new_assignment_replaces_completed_delivery(self):
        _driver_at("d-1", 51.51, -0.12)
        _create_delivery("ord-1")
        current_domain.process(MarkDelivered(driver_id="d-1"), asynchronous=False)
        _create_delivery("ord-2")

        view = delivery_for_driver("d-1")
        assert view.order_id == "ord-2"
        assert view.is_delivered is False

    def test_idle_driver_has_no_delivery(self):
        _driver_at("d-1", 51.51, -0.12)
        with pytest.raises(ObjectNotFoundError):
            delivery_for_driver("d-1")
