"""Delivery bounded context — drivers, their positions and the deliveries they carry.

Serves the tracking reads the client polls: a delivery's driver position for
the customer, and the active delivery for the driver. Uses CQRS because a
delivery is a short linear workflow and position updates overwrite in place.
"""

from protean.domain import Domain

delivery = Domain(name="delivery")
