"""Referential guards checked before destructive or linking writes."""
from __future__ import annotations

from typing import Callable, Iterable

from ..errors import Failure, conflict, invalid
from ..schemas import Trip, TripFields

RECEIVED_TRIP = "Cannot delete a received trip"

# trip attribute that points at each directory kind
TRIP_LINKS = {
    "driver": "driver_id",
    "client": "client_id",
    "company": "company_id",
    "user": "created_by_user_id",
}


def is_referenced(trips: Iterable[Trip], kind: str, record_id: str) -> bool:
    field = TRIP_LINKS[kind]
    return any(getattr(t, field) == record_id for t in trips)


def check_trip_deletable(trip: Trip) -> Failure | None:
    if trip.received:
        return conflict(RECEIVED_TRIP)
    return None


def check_trip_links(
    fields: TripFields,
    driver_exists: Callable[[str], bool],
    company_exists: Callable[[str], bool],
    client_exists: Callable[[str], bool],
) -> Failure | None:
    """Driver and company must resolve; client only when one is given."""
    if not driver_exists(fields.driver_id):
        return invalid("Driver not found")
    if not company_exists(fields.company_id):
        return invalid("Company not found")
    if fields.client_id is not None and not client_exists(fields.client_id):
        return invalid("Client not found")
    return None
