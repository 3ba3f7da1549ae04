"""Driver registration and location push — commands and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Float, Identifier, String
from protean.utils.globals import current_domain

from delivery.domain import delivery
from delivery.driver.driver import Driver


@delivery.command(part_of="Driver")
class RegisterDriver:
    driver_id = Identifier(required=True)
    name = String(max_length=100)


@delivery.command(part_of="Driver")
class UpdateDriverLocation:
    """Position pushed by the driver's device. Unknown drivers are registered on the fly."""

    driver_id = Identifier(required=True)
    latitude = Float(required=True)
    longitude = Float(required=True)


@delivery.command_handler(part_of=Driver)
class DriverHandler:
    @handle(RegisterDriver)
    def register_driver(self, command):
        repo = current_domain.repository_for(Driver)
        if repo._dao.query.filter(driver_id=command.driver_id).all().items:
            raise ValidationError({"driver_id": [f"Driver {command.driver_id} is already registered"]})
        driver = Driver.register(command.driver_id, command.name)
        repo.add(driver)
        return driver.driver_id

    @handle(UpdateDriverLocation)
    def update_location(self, command):
        repo = current_domain.repository_for(Driver)
        try:
            driver = repo.get(command.driver_id)
        except ObjectNotFoundError:
            driver = Driver.register(command.driver_id)
        driver.update_location(command.latitude, command.longitude)
        repo.add(driver)
