from __future__ import annotations

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from .models.base import Base  # noqa: F401  (re-exported for alembic / create_all)


# ---------- Engine / Session ----------
def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def normalize_url(url: str) -> str:
    # hosted postgres hands out postgres:// urls; we ship the psycopg 3 driver
    for prefix in ("postgres://", "postgresql://"):
        if url.startswith(prefix):
            return "postgresql+psycopg://" + url[len(prefix):]
    return url


def make_engine(database_url: str) -> Engine:
    database_url = normalize_url(database_url)
    # SQLite and PostgreSQL (or anything else SQLAlchemy speaks)
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # one shared connection, otherwise every session sees an empty db
            kwargs["poolclass"] = StaticPool
        engine = create_engine(database_url, future=True, **kwargs)

        # per connection: sqlite ignores foreign keys unless asked
        @event.listens_for(engine, "connect")
        def _sqlite_on_connect(dbapi_conn, _record):
            cur = dbapi_conn.cursor()
            cur.execute("PRAGMA foreign_keys=ON")
            cur.close()
            # built-in lower() / LIKE fold ASCII only
            dbapi_conn.create_function("lower", 1, _unicode_lower, deterministic=True)

        return engine

    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=5,
        future=True,
    )


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
        future=True,
    )
