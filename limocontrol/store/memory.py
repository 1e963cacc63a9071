"""Ephemeral backing: id-keyed collections owned by a single store object."""
from __future__ import annotations

import threading
from typing import Type

from ..errors import Result, conflict, invalid, not_found
from ..logging_config import get_logger
from ..schemas import (
    Client, ClientFields, Company, DashboardSummary, Driver,
    SafeUser, Trip, TripFields, TripFilter, User,
)
from . import integrity
from .base import (
    ClientRepository, DashboardRepository, DirectoryRepository, Store, TripRepository,
    UserRepository, new_id, utcnow,
)

logger = get_logger(__name__)

# update() keeps the stored value when these come in as None
_SPARSE_TRIP_FIELDS = ("received", "meet_greet", "client_phone")


class _Tables:
    def __init__(self) -> None:
        self.users: dict[str, User] = {}
        self.drivers: dict[str, Driver] = {}
        self.clients: dict[str, Client] = {}
        self.companies: dict[str, Company] = {}
        self.trips: dict[str, Trip] = {}


def _newest_first(rows):
    # stable sort over reversed insertion order: equal timestamps keep newest first
    return sorted(reversed(list(rows)), key=lambda r: r.created_at, reverse=True)


class _MemoryDirectory(DirectoryRepository):
    def __init__(self, tables: _Tables, lock: threading.RLock, kind: str, table: str,
                 model: Type, prefix: str) -> None:
        self._tables = tables
        self._lock = lock
        self.kind = kind
        self._table = table
        self._model = model
        self._prefix = prefix

    @property
    def _rows(self) -> dict:
        return getattr(self._tables, self._table)

    def list(self):
        with self._lock:
            return _newest_first(self._rows.values())

    def get(self, record_id):
        with self._lock:
            return self._rows.get(record_id)

    def create(self, fields):
        with self._lock:
            rec = self._model(id=new_id(self._prefix), created_at=utcnow(), active=True, **fields.model_dump())
            self._rows[rec.id] = rec
            return rec

    def update(self, record_id, fields):
        with self._lock:
            cur = self._rows.get(record_id)
            if cur is None:
                return self._not_found()
            rec = self._model.model_validate({**cur.model_dump(), **fields.model_dump()})
            self._rows[record_id] = rec
            return rec

    def set_active(self, record_id, active):
        with self._lock:
            cur = self._rows.get(record_id)
            if cur is None:
                return self._not_found()
            rec = cur.model_copy(update={"active": bool(active)})
            self._rows[record_id] = rec
            return rec

    def delete(self, record_id):
        with self._lock:
            cur = self._rows.get(record_id)
            if cur is None:
                return self._not_found()
            if integrity.is_referenced(self._tables.trips.values(), self.kind, record_id):
                logger.info("refusing to delete %s %s: linked trips", self.kind, record_id)
                return self._in_use()
            del self._rows[record_id]
            return cur


class _MemoryClients(_MemoryDirectory, ClientRepository):
    def find_or_create_by_name(self, name):
        normalized = (name or "").strip()
        if not normalized:
            return invalid("Client name is required")
        key = normalized.lower()
        with self._lock:
            for c in self._rows.values():
                if c.name.strip().lower() == key:
                    return c
            return self.create(ClientFields.model_construct(name=normalized, phone=None, address=None))


class _MemoryUsers(UserRepository):
    def __init__(self, tables: _Tables, lock: threading.RLock) -> None:
        self._tables = tables
        self._lock = lock

    def find_by_email(self, email):
        key = (email or "").lower()
        with self._lock:
            for u in self._tables.users.values():
                if u.email.lower() == key:
                    return u
            return None

    def get(self, user_id):
        with self._lock:
            return self._tables.users.get(user_id)

    def count(self):
        with self._lock:
            return len(self._tables.users)

    def list_safe(self):
        with self._lock:
            return [u.safe() for u in _newest_first(self._tables.users.values())]

    def create(self, name, email, password_hash, role):
        email = email.lower()
        with self._lock:
            if self.find_by_email(email) is not None:
                return conflict("Email already exists")
            u = User(id=new_id("u"), created_at=utcnow(), name=name, email=email,
                     password_hash=password_hash, role=role)
            self._tables.users[u.id] = u
            return u.safe()

    def _patch(self, user_id, changes) -> Result[SafeUser]:
        with self._lock:
            cur = self._tables.users.get(user_id)
            if cur is None:
                return not_found("User not found")
            u = cur.model_copy(update=changes)
            self._tables.users[user_id] = u
            return u.safe()

    def update(self, user_id, name=None, role=None):
        changes = {k: v for k, v in (("name", name), ("role", role)) if v is not None}
        return self._patch(user_id, changes)

    def set_password_hash(self, user_id, password_hash):
        return self._patch(user_id, {"password_hash": password_hash})

    def delete(self, user_id):
        with self._lock:
            cur = self._tables.users.get(user_id)
            if cur is None:
                return not_found("User not found")
            if integrity.is_referenced(self._tables.trips.values(), "user", user_id):
                logger.info("refusing to delete user %s: owns trips", user_id)
                return conflict("Cannot delete user with trips")
            del self._tables.users[user_id]
            return cur.safe()


class _MemoryTrips(TripRepository):
    def __init__(self, tables: _Tables, lock: threading.RLock) -> None:
        self._tables = tables
        self._lock = lock

    def _check_links(self, fields: TripFields):
        t = self._tables
        return integrity.check_trip_links(
            fields,
            driver_exists=lambda i: i in t.drivers,
            company_exists=lambda i: i in t.companies,
            client_exists=lambda i: i in t.clients,
        )

    def list(self, flt=None):
        flt = flt or TripFilter()
        with self._lock:
            rows = [t for t in self._tables.trips.values() if flt.matches(t)]
        return sorted(rows, key=lambda t: t.start_at, reverse=True)

    def get(self, trip_id):
        with self._lock:
            return self._tables.trips.get(trip_id)

    def create(self, fields, created_by_user_id):
        with self._lock:
            if created_by_user_id not in self._tables.users:
                return invalid("User not found")
            failure = self._check_links(fields)
            if failure:
                return failure
            data = fields.model_dump()
            data["received"] = bool(data.get("received") or False)
            t = Trip.model_validate({
                **data,
                "id": new_id("t"),
                "created_at": utcnow(),
                "created_by_user_id": created_by_user_id,
            })
            self._tables.trips[t.id] = t
            return t

    def update(self, trip_id, fields):
        with self._lock:
            cur = self._tables.trips.get(trip_id)
            if cur is None:
                return not_found("Trip not found")
            failure = self._check_links(fields)
            if failure:
                return failure
            changes = fields.model_dump(exclude=set(_SPARSE_TRIP_FIELDS))
            for name in _SPARSE_TRIP_FIELDS:
                value = getattr(fields, name)
                if value is not None:
                    changes[name] = value
            t = Trip.model_validate({**cur.model_dump(), **changes})
            self._tables.trips[trip_id] = t
            return t

    def set_received(self, trip_id, received):
        with self._lock:
            cur = self._tables.trips.get(trip_id)
            if cur is None:
                return not_found("Trip not found")
            t = cur.model_copy(update={"received": bool(received)})
            self._tables.trips[trip_id] = t
            return t

    def delete(self, trip_id):
        with self._lock:
            cur = self._tables.trips.get(trip_id)
            if cur is None:
                return not_found("Trip not found")
            failure = integrity.check_trip_deletable(cur)
            if failure:
                logger.info("refusing to delete trip %s: already received", trip_id)
                return failure
            del self._tables.trips[trip_id]
            return cur


class _MemoryDashboard(DashboardRepository):
    def __init__(self, trips: _MemoryTrips) -> None:
        self._trips = trips

    def summary(self, created_by_user_id=None):
        rows = self._trips.list(TripFilter(created_by_user_id=created_by_user_id))
        if not rows:
            return DashboardSummary()
        avg = sum(t.duration_minutes for t in rows) / len(rows)
        return DashboardSummary(
            total_trips=len(rows),
            total_revenue=sum(t.price for t in rows),
            total_miles=sum(t.miles for t in rows),
            avg_duration_minutes=round(avg, 2),
        )


class MemoryStore(Store):
    """In-process store; data is lost on restart."""

    backend = "memory"

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._tables = _Tables()
        self.users = _MemoryUsers(self._tables, self._lock)
        self.drivers = _MemoryDirectory(self._tables, self._lock, "driver", "drivers", Driver, "d")
        self.clients = _MemoryClients(self._tables, self._lock, "client", "clients", Client, "c")
        self.companies = _MemoryDirectory(self._tables, self._lock, "company", "companies", Company, "co")
        self.trips = _MemoryTrips(self._tables, self._lock)
        self.dashboard = _MemoryDashboard(self.trips)
