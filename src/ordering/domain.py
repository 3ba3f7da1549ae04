"""Ordering bounded context — authoritative order records for the food-ordering client.

One order per restaurant. Status changes are validated against the shared
order lifecycle table independently of whatever the client already checked.
Uses CQRS; orders are simple linear records with a small state machine.
"""

from protean.domain import Domain

ordering = Domain(name="ordering")
