"""FastAPI routes for the Delivery domain — drivers, assignment and tracking."""

from dataclasses import asdict

import structlog
from fastapi import APIRouter
from protean.utils.globals import current_domain

from delivery.api.schemas import (
    AssignmentResponse,
    CreateDeliveryRequest,
    DeliveryCreatedResponse,
    DriverDeliveryResponse,
    DriverResponse,
    LocationUpdateRequest,
    RegisterDriverRequest,
    StatusResponse,
    TrackingResponse,
)
from delivery.delivery.assignment import AssignDriver, CreateDelivery, MarkDelivered
from delivery.delivery.delivery import Delivery
from delivery.delivery.tracking import delivery_for_driver, tracking_for_order
from delivery.driver.driver import Driver
from delivery.driver.location import RegisterDriver, UpdateDriverLocation

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Delivery Router
# ---------------------------------------------------------------------------
delivery_router = APIRouter(prefix="/delivery", tags=["delivery"])


@delivery_router.post("/drivers", status_code=201, response_model=DriverResponse)
async def register_driver(body: RegisterDriverRequest) -> DriverResponse:
    driver_id = current_domain.process(
        RegisterDriver(driver_id=body.driver_id, name=body.name),
        asynchronous=False,
    )
    driver = current_domain.repository_for(Driver).get(driver_id)
    return DriverResponse(driver_id=driver.driver_id, name=driver.name)


@delivery_router.post("/update-location", response_model=StatusResponse)
async def update_location(body: LocationUpdateRequest) -> StatusResponse:
    """Record the position pushed by a driver's device."""
    command = UpdateDriverLocation(
        driver_id=body.driver_id,
        latitude=body.latitude,
        longitude=body.longitude,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="Location updated")


@delivery_router.post("/create", status_code=201, response_model=DeliveryCreatedResponse)
async def create_delivery(body: CreateDeliveryRequest) -> DeliveryCreatedResponse:
    """Open a delivery for an order and hand it to the nearest free driver, if any."""
    command = CreateDelivery(
        order_id=body.order_id,
        shop_latitude=body.shop_latitude,
        shop_longitude=body.shop_longitude,
        destination_latitude=body.destination_latitude,
        destination_longitude=body.destination_longitude,
    )
    delivery_id = current_domain.process(command, asynchronous=False)
    dlv = current_domain.repository_for(Delivery).get(delivery_id)
    logger.info("delivery.created", order_id=body.order_id, driver_id=dlv.driver_id)
    return DeliveryCreatedResponse(delivery_id=delivery_id, order_id=dlv.order_id, driver_id=dlv.driver_id)


@delivery_router.post("/{order_id}/assign", response_model=AssignmentResponse)
async def assign_driver(order_id: str) -> AssignmentResponse:
    driver_id = current_domain.process(AssignDriver(order_id=order_id), asynchronous=False)
    return AssignmentResponse(order_id=order_id, driver_id=driver_id)


@delivery_router.get("/by-driver/{driver_id}", response_model=DriverDeliveryResponse)
async def get_driver_delivery(driver_id: str) -> DriverDeliveryResponse:
    return DriverDeliveryResponse(**asdict(delivery_for_driver(driver_id)))


@delivery_router.post("/mark-delivered/{driver_id}", response_model=StatusResponse)
async def mark_delivered(driver_id: str) -> StatusResponse:
    order_id = current_domain.process(MarkDelivered(driver_id=driver_id), asynchronous=False)
    logger.info("delivery.completed", order_id=order_id, driver_id=driver_id)
    return StatusResponse(status="Delivered")


@delivery_router.get("/{order_id}", response_model=TrackingResponse)
async def get_tracking(order_id: str) -> TrackingResponse:
    """Tracking record for an order; 404 until a driver is assigned."""
    return TrackingResponse(**asdict(tracking_for_order(order_id)))
