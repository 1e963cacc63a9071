# limocontrol/routers/users.py
from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ..config import Settings
from ..deps import get_settings, get_store, require_admin, unwrap
from ..schemas import SafeUser, UserCreate, UserUpdate
from ..services import auth as auth_service
from ..store import Store

# user management is admin-only as a whole
router = APIRouter(prefix="/users", tags=["users"], dependencies=[Depends(require_admin)])


@router.get("", response_model=list[SafeUser])
def api_list_users(store: Store = Depends(get_store)):
    return store.users.list_safe()


@router.post("", response_model=SafeUser, status_code=status.HTTP_201_CREATED)
def api_create_user(
    payload: UserCreate,
    store: Store = Depends(get_store),
    cfg: Settings = Depends(get_settings),
):
    return unwrap(auth_service.create_user(store, payload, cfg))


@router.put("/{user_id}", response_model=SafeUser)
def api_update_user(user_id: str, payload: UserUpdate, store: Store = Depends(get_store)):
    return unwrap(store.users.update(user_id, name=payload.name, role=payload.role))


@router.post("/{user_id}/reset-password")
def api_reset_password(
    user_id: str,
    store: Store = Depends(get_store),
    cfg: Settings = Depends(get_settings),
):
    """Sets the password back to the configured default; the old one is not needed."""
    unwrap(auth_service.reset_password(store, user_id, cfg))
    return {"ok": True}


@router.delete("/{user_id}", response_model=SafeUser)
def api_delete_user(user_id: str, store: Store = Depends(get_store)):
    return unwrap(store.users.delete(user_id))
