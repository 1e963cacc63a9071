"""First-run data: an admin account and, optionally, a demo record set."""
from __future__ import annotations

import datetime as dt

from ..config import Settings
from ..errors import Failure
from ..logging_config import get_logger
from ..schemas import ClientFields, CompanyFields, DriverFields, TripFields
from ..utils.security import hash_password
from .base import Store

logger = get_logger(__name__)


def seed_admin(store: Store, cfg: Settings):
    if store.users.count() > 0:
        return None
    email = (cfg.SEED_ADMIN_EMAIL or "admin@limo.local").lower()
    out = store.users.create(
        name="Admin",
        email=email,
        password_hash=hash_password(cfg.SEED_ADMIN_PASSWORD or "admin", cfg.BCRYPT_ROUNDS),
        role="admin",
    )
    if isinstance(out, Failure):
        logger.warning("admin seed skipped: %s", out.message)
        return None
    logger.info("seeded admin user %s", email)
    return out


def seed_demo(store: Store, owner_id: str) -> None:
    if store.drivers.list():
        return
    now = dt.datetime.now(dt.timezone.utc).replace(microsecond=0)
    driver = store.drivers.create(DriverFields(name="João Silva", phone="11999999999", license="ABC1234"))
    client = store.clients.create(ClientFields(name="Cliente Demo", phone="contato@cliente.com"))
    company = store.companies.create(CompanyFields(name="Empresa Parceira Demo", phone="11988887777"))
    store.trips.create(
        TripFields(
            driver_id=driver.id,
            client_id=client.id,
            company_id=company.id,
            vehicle_type="Sedan",
            cnf="CNF-DEMO",
            flight_number="AA123",
            start_at=now,
            end_at=now,
            origin="São Paulo",
            destination="Campinas",
            miles=60,
            duration_minutes=80,
            price=250,
            notes="Viagem inicial demo",
        ),
        owner_id,
    )
    logger.info("seeded demo driver/client/company/trip")


def seed_store(store: Store, cfg: Settings) -> None:
    admin = seed_admin(store, cfg)
    if cfg.SEED_DEMO_DATA:
        owner = admin or store.users.find_by_email(cfg.SEED_ADMIN_EMAIL)
        if owner is not None:
            seed_demo(store, owner.id)
