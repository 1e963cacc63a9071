from __future__ import annotations

from ..config import Settings, settings
from ..errors import Result, unauthorized
from ..logging_config import get_logger
from ..schemas import LoginResponse, LoginUser, SafeUser, UserCreate
from ..store import Store
from ..utils.security import create_access_token, hash_password, verify_password

logger = get_logger(__name__)

BAD_LOGIN = "Invalid email or password"


def authenticate(store: Store, email: str, password: str, cfg: Settings = settings) -> Result[LoginResponse]:
    """
    Check credentials and mint a bearer token.
    A legacy plaintext password that matches is re-hashed in a second step;
    if that write fails the login still goes through.
    """
    user = store.users.find_by_email(email)
    if user is None or not user.password_hash:
        return unauthorized(BAD_LOGIN)

    check = verify_password(password, user.password_hash)
    if not check.ok:
        return unauthorized(BAD_LOGIN)
    if check.needs_upgrade:
        upgrade_password(store, user.id, password, cfg)

    token = create_access_token(user.id, user.role, cfg)
    return LoginResponse(
        token=token,
        user=LoginUser(id=user.id, name=user.name, email=user.email, role=user.role),
    )


def upgrade_password(store: Store, user_id: str, password: str, cfg: Settings = settings) -> bool:
    try:
        out = store.users.set_password_hash(user_id, hash_password(password, cfg.BCRYPT_ROUNDS))
    except Exception:
        logger.warning("failed to upgrade legacy password hash for user %s", user_id, exc_info=True)
        return False
    if not isinstance(out, SafeUser):
        logger.warning("failed to upgrade legacy password hash for user %s: %s", user_id, out.message)
        return False
    logger.info("upgraded legacy password hash for user %s", user_id)
    return True


def create_user(store: Store, payload: UserCreate, cfg: Settings = settings) -> Result[SafeUser]:
    return store.users.create(
        name=payload.name,
        email=str(payload.email),
        password_hash=hash_password(payload.password, cfg.BCRYPT_ROUNDS),
        role=payload.role,
    )


def reset_password(store: Store, user_id: str, cfg: Settings = settings) -> Result[SafeUser]:
    """Admin reset: the account falls back to the well-known default password."""
    return store.users.set_password_hash(user_id, hash_password(cfg.DEFAULT_RESET_PASSWORD, cfg.BCRYPT_ROUNDS))
