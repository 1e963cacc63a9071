from limocontrol.config import Settings
from limocontrol.errors import ErrorKind, Failure, not_found
from limocontrol.services.auth import authenticate, reset_password
from limocontrol.store import MemoryStore
from limocontrol.utils.security import (
    create_access_token, create_jwt, hash_password, identity_from_token, verify_password,
)


def test_hash_and_verify():
    hashed = hash_password("s3cret!", 4)
    assert hashed.startswith("$2")
    assert verify_password("s3cret!", hashed) == (True, False)
    assert verify_password("wrong", hashed) == (False, False)


def test_plaintext_legacy_password_flags_upgrade():
    assert verify_password("legacy", "legacy") == (True, True)
    assert verify_password("other", "legacy") == (False, False)
    assert verify_password("anything", "") == (False, False)


def test_token_roundtrip(cfg):
    token = create_access_token("u_1", "admin", cfg)
    ident = identity_from_token(token, cfg)
    assert ident.user_id == "u_1"
    assert ident.is_admin


def test_token_role_defaults_to_user(cfg):
    ident = identity_from_token(create_jwt({"sub": "u_2"}, cfg), cfg)
    assert ident.role == "user"
    assert not ident.is_admin


def test_rejects_bad_tokens(cfg):
    assert identity_from_token("", cfg) is None
    assert identity_from_token("not-a-jwt", cfg) is None
    assert identity_from_token(create_jwt({"role": "admin"}, cfg), cfg) is None

    other = cfg.model_copy(update={"JWT_SECRET": "another-secret"})
    assert identity_from_token(create_access_token("u_1", "user", other), cfg) is None

    expired = cfg.model_copy(update={"JWT_TTL_SEC": -60})
    assert identity_from_token(create_access_token("u_1", "user", expired), cfg) is None


def test_secret_key_alias():
    assert Settings(SECRET_KEY="from-alias").JWT_SECRET == "from-alias"


def test_login_upgrades_legacy_password(store, cfg):
    user = store.users.create(name="Old Timer", email="old@limo.local", password_hash="legacy1", role="user")

    out = authenticate(store, "OLD@limo.local", "legacy1", cfg)
    assert not isinstance(out, Failure)
    assert out.user.id == user.id
    assert identity_from_token(out.token, cfg).user_id == user.id

    stored = store.users.get(user.id).password_hash
    assert stored != "legacy1"
    assert verify_password("legacy1", stored) == (True, False)
    assert not isinstance(authenticate(store, "old@limo.local", "legacy1", cfg), Failure)
    assert store.users.get(user.id).password_hash == stored


def test_login_survives_a_failed_upgrade_write(store, cfg, monkeypatch):
    user = store.users.create(name="Old Timer", email="old@limo.local", password_hash="legacy1", role="user")

    def broken_write(user_id, password_hash):
        raise RuntimeError("database went away")

    monkeypatch.setattr(store.users, "set_password_hash", broken_write)
    out = authenticate(store, "old@limo.local", "legacy1", cfg)
    assert identity_from_token(out.token, cfg).user_id == user.id
    assert store.users.get(user.id).password_hash == "legacy1"


def test_login_survives_an_upgrade_failure_result(store, cfg, monkeypatch):
    user = store.users.create(name="Old Timer", email="old@limo.local", password_hash="legacy1", role="user")

    monkeypatch.setattr(store.users, "set_password_hash", lambda user_id, password_hash: not_found("User not found"))
    out = authenticate(store, "old@limo.local", "legacy1", cfg)
    assert not isinstance(out, Failure)
    assert out.user.id == user.id
    assert store.users.get(user.id).password_hash == "legacy1"


def test_login_failures_share_one_message(cfg):
    store = MemoryStore()
    store.users.create(name="Ann", email="ann@limo.local", password_hash=hash_password("right1", 4), role="user")

    wrong = authenticate(store, "ann@limo.local", "wrong1", cfg)
    missing = authenticate(store, "nobody@limo.local", "right1", cfg)
    assert wrong.kind is ErrorKind.UNAUTHORIZED
    assert wrong == missing


def test_reset_password_uses_default(cfg):
    store = MemoryStore()
    user = store.users.create(name="Ann", email="ann@limo.local", password_hash=hash_password("right1", 4), role="user")

    reset_password(store, user.id, cfg)
    assert verify_password(cfg.DEFAULT_RESET_PASSWORD, store.users.get(user.id).password_hash).ok
    assert reset_password(store, "u_missing", cfg).kind is ErrorKind.NOT_FOUND
