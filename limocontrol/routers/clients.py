# limocontrol/routers/clients.py
from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ..deps import get_store, unwrap
from ..schemas import ActiveFlag, Client, ClientFields
from ..store import Store

router = APIRouter(prefix="/clients", tags=["clients"])


@router.get("", response_model=list[Client])
def api_list_clients(store: Store = Depends(get_store)):
    return store.clients.list()


@router.post("", response_model=Client, status_code=status.HTTP_201_CREATED)
def api_create_client(payload: ClientFields, store: Store = Depends(get_store)):
    return store.clients.create(payload)


@router.put("/{client_id}", response_model=Client)
def api_update_client(client_id: str, payload: ClientFields, store: Store = Depends(get_store)):
    return unwrap(store.clients.update(client_id, payload))


@router.patch("/{client_id}/active", response_model=Client)
def api_set_client_active(client_id: str, payload: ActiveFlag, store: Store = Depends(get_store)):
    return unwrap(store.clients.set_active(client_id, payload.active))


# 409 while trips still point at the client
@router.delete("/{client_id}", response_model=Client)
def api_delete_client(client_id: str, store: Store = Depends(get_store)):
    return unwrap(store.clients.delete(client_id))
