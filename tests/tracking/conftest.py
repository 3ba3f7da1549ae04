import asyncio
from types import SimpleNamespace

import pytest
from shared.geo import Location
from tracking.gateway.fake_adapter import FakeTrackingGateway
from tracking.gateway.port import DeliveryTracking, DriverDelivery

SHOP = Location(51.5033, -0.1196)
DRIVER = Location(51.5074, -0.1278)
CUSTOMER = Location(51.5155, -0.0922)


class FakeClock:
    """Stands in for ``asyncio.sleep``: records each requested delay and advances virtual time."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
        await asyncio.sleep(0)


async def take(subscription, count):
    """Collect up to ``count`` snapshots from a subscription stream."""
    snapshots = []
    async for snapshot in subscription:
        snapshots.append(snapshot)
        if len(snapshots) == count:
            break
    return snapshots


def tracking_record(order_id="ord-1", driver=DRIVER, customer=CUSTOMER, delivered=False):
    return DeliveryTracking(
        order_id=order_id,
        is_delivered=delivered,
        driver_name="Sam",
        driver_latitude=driver.latitude if driver else 0.0,
        driver_longitude=driver.longitude if driver else 0.0,
        customer_latitude=customer.latitude,
        customer_longitude=customer.longitude,
        estimated_arrival="6 mins",
    )


def driver_delivery(order_id="ord-1", driver=DRIVER):
    return DriverDelivery(
        order_id=order_id,
        shop_latitude=SHOP.latitude,
        shop_longitude=SHOP.longitude,
        destination_latitude=CUSTOMER.latitude,
        destination_longitude=CUSTOMER.longitude,
        driver_latitude=driver.latitude,
        driver_longitude=driver.longitude,
    )


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def gateway():
    return FakeTrackingGateway()


@pytest.fixture()
def places():
    return SimpleNamespace(shop=SHOP, driver=DRIVER, customer=CUSTOMER)


@pytest.fixture()
def make_tracking():
    return tracking_record


@pytest.fixture()
def make_driver_delivery():
    return driver_delivery


@pytest.fixture()
def collect():
    return take
