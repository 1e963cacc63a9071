"""Storage interface shared by the in-memory and relational backings."""
from __future__ import annotations

import datetime as dt
import secrets
from typing import Generic, TypeVar

from ..errors import Failure, Result, conflict, not_found
from ..schemas import (
    Client, ClientFields, DashboardSummary, SafeUser, Trip, TripFields, TripFilter, User,
)

E = TypeVar("E")
F = TypeVar("F")


def new_id(prefix: str) -> str:
    return f"{prefix}_{secrets.token_hex(8)}"


def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class DirectoryRepository(Generic[E, F]):
    """Drivers, clients and companies: plain records referenced by trips."""

    kind = "record"

    def list(self) -> list[E]:
        """All records, newest first."""
        raise NotImplementedError

    def exists(self, record_id: str) -> bool:
        return self.get(record_id) is not None

    def get(self, record_id: str) -> E | None:
        raise NotImplementedError

    def create(self, fields: F) -> E:
        raise NotImplementedError

    def update(self, record_id: str, fields: F) -> Result[E]:
        raise NotImplementedError

    def set_active(self, record_id: str, active: bool) -> Result[E]:
        raise NotImplementedError

    def delete(self, record_id: str) -> Result[E]:
        """Remove the record unless a trip still points at it."""
        raise NotImplementedError

    def _not_found(self) -> Failure:
        return not_found(f"{self.kind.capitalize()} not found")

    def _in_use(self) -> Failure:
        return conflict(f"Cannot delete {self.kind} with trips")


class ClientRepository(DirectoryRepository[Client, ClientFields]):
    kind = "client"

    def find_or_create_by_name(self, name: str) -> Result[Client]:
        """Return the client whose name matches case-insensitively, creating it on miss."""
        raise NotImplementedError


class UserRepository:
    def find_by_email(self, email: str) -> User | None:
        raise NotImplementedError

    def get(self, user_id: str) -> User | None:
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError

    def list_safe(self) -> list[SafeUser]:
        raise NotImplementedError

    def create(self, name: str, email: str, password_hash: str, role: str) -> Result[SafeUser]:
        raise NotImplementedError

    def update(self, user_id: str, name: str | None = None, role: str | None = None) -> Result[SafeUser]:
        raise NotImplementedError

    def set_password_hash(self, user_id: str, password_hash: str) -> Result[SafeUser]:
        raise NotImplementedError

    def delete(self, user_id: str) -> Result[SafeUser]:
        raise NotImplementedError


class TripRepository:
    def list(self, flt: TripFilter | None = None) -> list[Trip]:
        """Matching trips ordered by start time, latest first."""
        raise NotImplementedError

    def get(self, trip_id: str) -> Trip | None:
        raise NotImplementedError

    def create(self, fields: TripFields, created_by_user_id: str) -> Result[Trip]:
        raise NotImplementedError

    def update(self, trip_id: str, fields: TripFields) -> Result[Trip]:
        raise NotImplementedError

    def set_received(self, trip_id: str, received: bool) -> Result[Trip]:
        raise NotImplementedError

    def delete(self, trip_id: str) -> Result[Trip]:
        raise NotImplementedError


class DashboardRepository:
    def summary(self, created_by_user_id: str | None = None) -> DashboardSummary:
        raise NotImplementedError


class Store:
    """Entry point for all persistence; one instance per process."""

    backend = "base"

    users: UserRepository
    drivers: DirectoryRepository
    clients: ClientRepository
    companies: DirectoryRepository
    trips: TripRepository
    dashboard: DashboardRepository

    def init(self) -> None:
        """Prepare the backing (schema etc.). Safe to call more than once."""

    def close(self) -> None:
        """Release backing resources."""
