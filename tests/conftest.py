import datetime as dt

import pytest
from fastapi.testclient import TestClient

from limocontrol.config import Settings
from limocontrol.main import create_app
from limocontrol.schemas import CompanyFields, DriverFields, TripFields
from limocontrol.store import MemoryStore, SqlStore
from limocontrol.utils.security import hash_password

ADMIN_EMAIL = "admin@limo.local"
ADMIN_PASSWORD = "admin"


@pytest.fixture
def cfg():
    return Settings(
        DATABASE_URL=None,
        JWT_SECRET="test-secret",
        BCRYPT_ROUNDS=4,
        SEED_ADMIN_EMAIL=ADMIN_EMAIL,
        SEED_ADMIN_PASSWORD=ADMIN_PASSWORD,
        SEED_DEMO_DATA=False,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture(params=["memory", "sql"])
def store(request, tmp_path):
    if request.param == "memory":
        s = MemoryStore()
    else:
        s = SqlStore(f"sqlite:///{tmp_path / 'limo.db'}")
    s.init()
    yield s
    s.close()


@pytest.fixture
def owner(store):
    return store.users.create(name="Owner", email="owner@limo.local",
                              password_hash=hash_password("secret1", 4), role="user")


@pytest.fixture
def driver(store):
    return store.drivers.create(DriverFields(name="Carlos Lima", phone="555-0100"))


@pytest.fixture
def company(store):
    return store.companies.create(CompanyFields(name="Blue Line Travel"))


def when(day: int, hour: int = 10) -> dt.datetime:
    return dt.datetime(2024, 5, day, hour, 0, tzinfo=dt.timezone.utc)


def trip_fields(driver_id: str, company_id: str, **overrides) -> TripFields:
    data = dict(
        driver_id=driver_id,
        company_id=company_id,
        start_at=when(1),
        end_at=when(1, 11),
        origin="JFK",
        destination="Manhattan",
        miles=20,
        duration_minutes=45,
        price=120,
    )
    data.update(overrides)
    return TripFields(**data)


# ---------- HTTP ----------

@pytest.fixture
def client(cfg):
    app = create_app(cfg, MemoryStore())
    # entering the context runs startup, which seeds the admin
    with TestClient(app) as c:
        yield c


def login(client, email, password) -> str:
    resp = client.post("/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()["token"]


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(client):
    return bearer(login(client, ADMIN_EMAIL, ADMIN_PASSWORD))


@pytest.fixture
def make_user(client, admin_headers):
    def _make(email, password="secret1", role="user", name="Some User"):
        resp = client.post("/users", headers=admin_headers,
                           json={"name": name, "email": email, "password": password, "role": role})
        assert resp.status_code == 201, resp.text
        return resp.json(), bearer(login(client, email, password))
    return _make
