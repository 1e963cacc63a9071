# limocontrol/routers/trips.py
from __future__ import annotations

from typing import Optional, Union

from fastapi import APIRouter, Depends, Query, status

from ..deps import get_current_identity, get_store, unwrap
from ..schemas import ReceivedFlag, Trip, TripFilter, TripIn
from ..services import trips as trip_service
from ..store import Store
from ..utils.security import Identity

router = APIRouter(prefix="/trips", tags=["trips"])


def _meet_greet_filter(raw: Optional[str]) -> Union[bool, str, None]:
    # true/false -> presence filter, anything else -> substring
    if raw is None:
        return None
    if raw == "true":
        return True
    if raw == "false":
        return False
    return raw


@router.get("", response_model=list[Trip])
def api_list_trips(
    driver_id: Optional[str] = Query(None, alias="driverId"),
    client_id: Optional[str] = Query(None, alias="clientId"),
    company_id: Optional[str] = Query(None, alias="companyId"),
    cnf: Optional[str] = Query(None),
    flight_number: Optional[str] = Query(None, alias="flightNumber"),
    meet_greet: Optional[str] = Query(None, alias="meetGreet"),
    identity: Identity = Depends(get_current_identity),
    store: Store = Depends(get_store),
):
    flt = TripFilter(
        driver_id=driver_id or None,
        client_id=client_id or None,
        company_id=company_id or None,
        cnf=cnf or None,
        flight_number=flight_number or None,
        meet_greet=_meet_greet_filter(meet_greet),
    )
    return trip_service.list_trips(store, identity, flt)


@router.get("/{trip_id}", response_model=Trip)
def api_get_trip(
    trip_id: str,
    identity: Identity = Depends(get_current_identity),
    store: Store = Depends(get_store),
):
    return unwrap(trip_service.load_trip_for(store, identity, trip_id))


@router.post("", response_model=Trip, status_code=status.HTTP_201_CREATED)
def api_create_trip(
    payload: TripIn,
    identity: Identity = Depends(get_current_identity),
    store: Store = Depends(get_store),
):
    """
    Create a trip owned by the caller.
    Driver and company must exist; the client is picked by id or by name.
    """
    return unwrap(trip_service.create_trip(store, identity, payload))


@router.put("/{trip_id}", response_model=Trip)
def api_update_trip(
    trip_id: str,
    payload: TripIn,
    identity: Identity = Depends(get_current_identity),
    store: Store = Depends(get_store),
):
    return unwrap(trip_service.update_trip(store, identity, trip_id, payload))


@router.patch("/{trip_id}/received", response_model=Trip)
def api_set_trip_received(
    trip_id: str,
    payload: ReceivedFlag,
    identity: Identity = Depends(get_current_identity),
    store: Store = Depends(get_store),
):
    return unwrap(trip_service.set_received(store, identity, trip_id, payload.received))


# received (paid) trips answer 409
@router.delete("/{trip_id}", response_model=Trip)
def api_delete_trip(
    trip_id: str,
    identity: Identity = Depends(get_current_identity),
    store: Store = Depends(get_store),
):
    return unwrap(trip_service.delete_trip(store, identity, trip_id))
