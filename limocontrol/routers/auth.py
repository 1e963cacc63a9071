# limocontrol/routers/auth.py
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..config import Settings
from ..deps import get_settings, get_store, unwrap
from ..schemas import LoginRequest, LoginResponse
from ..services.auth import authenticate
from ..store import Store

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
def api_login(
    payload: LoginRequest,
    store: Store = Depends(get_store),
    cfg: Settings = Depends(get_settings),
):
    out = unwrap(authenticate(store, payload.email, payload.password, cfg))
    # the token must never be cached by a proxy
    resp = JSONResponse(out.model_dump(mode="json", by_alias=True))
    resp.headers["Cache-Control"] = "no-store"
    return resp
