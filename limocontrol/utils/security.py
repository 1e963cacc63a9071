import hmac
import time
from dataclasses import dataclass
from typing import NamedTuple

import bcrypt
from jose import jwt, JWTError

from ..config import Settings, settings


@dataclass(frozen=True)
class Identity:
    user_id: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class PasswordCheck(NamedTuple):
    ok: bool
    needs_upgrade: bool  # stored value was legacy plaintext


# ---------- JWT ----------

def create_jwt(payload: dict, cfg: Settings = settings) -> str:
    exp = int(time.time()) + cfg.JWT_TTL_SEC
    return jwt.encode({**payload, "exp": exp}, cfg.JWT_SECRET, algorithm=cfg.JWT_ALG)

def decode_jwt(token: str, cfg: Settings = settings):
    try:
        return jwt.decode(token, cfg.JWT_SECRET, algorithms=[cfg.JWT_ALG])
    except JWTError:
        return None

def create_access_token(user_id: str, role: str, cfg: Settings = settings) -> str:
    return create_jwt({"sub": user_id, "role": role}, cfg)

def identity_from_token(token: str, cfg: Settings = settings) -> Identity | None:
    """None for anything that is not a valid, unexpired token with a subject."""
    if not token:
        return None
    claims = decode_jwt(token, cfg)
    if not claims or not claims.get("sub"):
        return None
    return Identity(user_id=str(claims["sub"]), role=claims.get("role") or "user")


# ---------- Passwords ----------

def hash_password(password: str, rounds: int = settings.BCRYPT_ROUNDS) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("ascii")

def verify_password(password: str, stored: str) -> PasswordCheck:
    if not stored:
        return PasswordCheck(False, False)
    try:
        return PasswordCheck(bcrypt.checkpw(password.encode("utf-8"), stored.encode("utf-8")), False)
    except ValueError:
        # not a bcrypt hash: rows written before hashing was introduced
        ok = hmac.compare_digest(stored.encode("utf-8"), password.encode("utf-8"))
        return PasswordCheck(ok, ok)
