# limocontrol/deps.py
from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header, HTTPException, Request, status

from .config import Settings
from .errors import Failure
from .store import Store
from .utils.security import Identity, identity_from_token


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> Store:
    return request.app.state.store


def unwrap(result):
    """Turn a business Failure into the matching HTTP error."""
    if isinstance(result, Failure):
        raise HTTPException(status_code=result.status_code, detail=result.message)
    return result


# ------------------ Bearer token ------------------

def get_current_identity(
    request: Request,
    authorization: Optional[str] = Header(None),
) -> Identity:
    scheme, _, token = (authorization or "").partition(" ")
    if scheme != "Bearer" or not token.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing Bearer token",
        )

    identity = identity_from_token(token.strip(), get_settings(request))
    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
        )
    return identity


# ------------------ Admin guard ------------------

def require_admin(identity: Identity = Depends(get_current_identity)) -> Identity:
    if identity.is_admin:
        return identity

    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="Forbidden",
    )
