"""The driver's tracking loops against the delivery API, end to end over ASGI."""

import asyncio

import httpx
import pytest
from delivery.api.routes import delivery_router
from delivery.delivery.assignment import CreateDelivery, MarkDelivered
from delivery.driver.location import RegisterDriver, UpdateDriverLocation
from fastapi import FastAPI
from protean import current_domain
from protean.integrations.fastapi import register_exception_handlers
from shared.geo import Location
from tracking.gateway.http_adapter import HttpTrackingGateway
from tracking.locator import ScriptedLocator
from tracking.reconciler import TrackingReconciler
from tracking.snapshot import PresentationState

BASE_URL = "http://food.test"
ON_THE_ROAD = Location(51.5100, -0.1100)


@pytest.fixture()
def gateway():
    app = FastAPI()
    app.include_router(delivery_router)
    register_exception_handlers(app)
    client = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.ASGITransport(app=app))
    return HttpTrackingGateway(BASE_URL, client=client)


@pytest.fixture()
def assigned_driver():
    current_domain.process(RegisterDriver(driver_id="d-1", name="Sam"), asynchronous=False)
    current_domain.process(
        UpdateDriverLocation(driver_id="d-1", latitude=51.5080, longitude=-0.1270),
        asynchronous=False,
    )
    current_domain.process(
        CreateDelivery(
            order_id="ord-1",
            shop_latitude=51.5074,
            shop_longitude=-0.1278,
            destination_latitude=51.5155,
            destination_longitude=-0.0922,
        ),
        asynchronous=False,
    )
    return "d-1"


async def _tick(seconds):
    await asyncio.sleep(0)


def test_completed_delivery_stops_driver_loops(gateway, assigned_driver):
    async def scenario():
        reconciler = TrackingReconciler(gateway, ScriptedLocator([ON_THE_ROAD]), sleep=_tick)
        subscription = reconciler.drive(assigned_driver)
        async for first in subscription:
            break
        current_domain.process(MarkDelivered(driver_id=assigned_driver), asynchronous=False)
        rest = [snapshot async for snapshot in subscription]
        await subscription.wait_closed()
        await gateway.aclose()
        return subscription, first, rest

    subscription, first, rest = asyncio.run(scenario())

    assert first.state is PresentationState.TRACKING
    assert first.order_id == "ord-1"
    assert rest[-1].state is PresentationState.DELIVERED
    assert not subscription.active
    assert all(task.done() for task in subscription.tasks)
