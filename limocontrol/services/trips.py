# limocontrol/services/trips.py
from __future__ import annotations

from ..errors import Failure, Result, forbidden, invalid, not_found
from ..schemas import DashboardSummary, Trip, TripFields, TripFilter, TripIn
from ..store import Store
from ..utils.security import Identity

# utilities

def owner_scope(identity: Identity) -> str | None:
    """Admins read everything; everyone else reads only their own trips."""
    return None if identity.is_admin else identity.user_id


def _ensure_trip_owner(trip: Trip, identity: Identity) -> Failure | None:
    if not identity.is_admin and trip.created_by_user_id != identity.user_id:
        return forbidden()
    return None


def load_trip_for(store: Store, identity: Identity, trip_id: str) -> Result[Trip]:
    # existence first, ownership second
    trip = store.trips.get(trip_id)
    if trip is None:
        return not_found("Trip not found")
    failure = _ensure_trip_owner(trip, identity)
    return failure or trip


def resolve_trip_fields(store: Store, payload: TripIn) -> Result[TripFields]:
    """
    Check driver/company and settle the client:
      - clientId given -> must exist
      - otherwise clientName -> find-or-create by name
      - neither -> trip without client
    """
    if not store.drivers.exists(payload.driver_id):
        return invalid("Driver not found")
    if not store.companies.exists(payload.company_id):
        return invalid("Company not found")

    client_id = None
    if payload.client_id and payload.client_id.strip():
        client_id = payload.client_id.strip()
        if not store.clients.exists(client_id):
            return invalid("Client not found")
    else:
        client_name = (payload.client_name or "").strip()
        if client_name:
            client = store.clients.find_or_create_by_name(client_name)
            if isinstance(client, Failure):
                return client
            client_id = client.id

    data = payload.model_dump(exclude={"client_id", "client_name"})
    return TripFields(**data, client_id=client_id)


# list of trips visible to the caller
def list_trips(store: Store, identity: Identity, flt: TripFilter) -> list[Trip]:
    scoped = flt.model_copy(update={"created_by_user_id": owner_scope(identity)})
    return store.trips.list(scoped)


def create_trip(store: Store, identity: Identity, payload: TripIn) -> Result[Trip]:
    fields = resolve_trip_fields(store, payload)
    if isinstance(fields, Failure):
        return fields
    return store.trips.create(fields, identity.user_id)


def update_trip(store: Store, identity: Identity, trip_id: str, payload: TripIn) -> Result[Trip]:
    trip = load_trip_for(store, identity, trip_id)
    if isinstance(trip, Failure):
        return trip
    fields = resolve_trip_fields(store, payload)
    if isinstance(fields, Failure):
        return fields
    return store.trips.update(trip_id, fields)


def set_received(store: Store, identity: Identity, trip_id: str, received: bool) -> Result[Trip]:
    trip = load_trip_for(store, identity, trip_id)
    if isinstance(trip, Failure):
        return trip
    return store.trips.set_received(trip_id, received)


def delete_trip(store: Store, identity: Identity, trip_id: str) -> Result[Trip]:
    trip = load_trip_for(store, identity, trip_id)
    if isinstance(trip, Failure):
        return trip
    return store.trips.delete(trip_id)


def dashboard_summary(store: Store, identity: Identity) -> DashboardSummary:
    return store.dashboard.summary(owner_scope(identity))
