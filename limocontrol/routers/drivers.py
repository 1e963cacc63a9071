# limocontrol/routers/drivers.py
from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ..deps import get_store, unwrap
from ..schemas import ActiveFlag, Driver, DriverFields
from ..store import Store

router = APIRouter(prefix="/drivers", tags=["drivers"])


@router.get("", response_model=list[Driver])
def api_list_drivers(store: Store = Depends(get_store)):
    return store.drivers.list()


@router.post("", response_model=Driver, status_code=status.HTTP_201_CREATED)
def api_create_driver(payload: DriverFields, store: Store = Depends(get_store)):
    return store.drivers.create(payload)


@router.put("/{driver_id}", response_model=Driver)
def api_update_driver(driver_id: str, payload: DriverFields, store: Store = Depends(get_store)):
    return unwrap(store.drivers.update(driver_id, payload))


@router.patch("/{driver_id}/active", response_model=Driver)
def api_set_driver_active(driver_id: str, payload: ActiveFlag, store: Store = Depends(get_store)):
    return unwrap(store.drivers.set_active(driver_id, payload.active))


# 409 while trips still point at the driver
@router.delete("/{driver_id}", response_model=Driver)
def api_delete_driver(driver_id: str, store: Store = Depends(get_store)):
    return unwrap(store.drivers.delete(driver_id))
