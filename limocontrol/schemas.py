# limocontrol/schemas.py
from __future__ import annotations

import datetime as dt
import math
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

Role = Literal["admin", "user"]
VehicleType = Literal["SUV", "Sedan", "Economy"]

# loose on purpose: seeded accounts live on .local domains
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
PASSWORD_MAX_BYTES = 72


def as_utc(value: dt.datetime) -> dt.datetime:
    # naive values (sqlite, clients without offset) are read as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=dt.timezone.utc)
    return value.astimezone(dt.timezone.utc)


def blank_to_none(value: str | None) -> str | None:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def check_password_bytes(value: str) -> str:
    # bcrypt works on at most 72 bytes, not characters
    if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"password must be at most {PASSWORD_MAX_BYTES} bytes")
    return value


class CamelModel(BaseModel):
    # JSON speaks camelCase, python speaks snake_case
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Entity(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    created_at: dt.datetime

    @field_validator("created_at")
    @classmethod
    def _created_at_utc(cls, v: dt.datetime) -> dt.datetime:
        return as_utc(v)


# ---------- Users ----------

class User(Entity):
    name: str
    email: str
    password_hash: str
    role: Role

    def safe(self) -> "SafeUser":
        return SafeUser(id=self.id, name=self.name, email=self.email, role=self.role, created_at=self.created_at)


class SafeUser(Entity):
    """User projection without the credential."""
    name: str
    email: str
    role: Role


class UserCreate(CamelModel):
    name: str = Field(min_length=2)
    email: str = Field(pattern=EMAIL_PATTERN)
    password: str = Field(min_length=6, max_length=72)
    role: Role = "user"

    @field_validator("password")
    @classmethod
    def _password_fits_bcrypt(cls, v: str) -> str:
        return check_password_bytes(v)


class UserUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=2)
    role: Role | None = None


class LoginRequest(CamelModel):
    email: str = Field(pattern=EMAIL_PATTERN)
    password: str = Field(min_length=3, max_length=72)

    @field_validator("password")
    @classmethod
    def _password_fits_bcrypt(cls, v: str) -> str:
        return check_password_bytes(v)


class LoginUser(CamelModel):
    id: str
    name: str
    email: str
    role: Role


class LoginResponse(CamelModel):
    token: str
    user: LoginUser


# ---------- Drivers / Clients / Companies ----------

class Driver(Entity):
    name: str
    phone: str | None = None
    license: str | None = None
    active: bool = True


class DriverFields(CamelModel):
    name: str = Field(min_length=2)
    phone: str | None = None
    license: str | None = None


class Client(Entity):
    name: str
    phone: str | None = None
    address: str | None = None
    active: bool = True


class ClientFields(CamelModel):
    name: str = Field(min_length=2)
    phone: str | None = None
    address: str | None = None


class Company(Entity):
    name: str
    phone: str | None = None
    active: bool = True


class CompanyFields(CamelModel):
    name: str = Field(min_length=2)
    phone: str | None = None


class ActiveFlag(CamelModel):
    active: bool


# ---------- Trips ----------

class TripFields(CamelModel):
    """Resolved trip payload handed to the store.

    On update ``received``, ``meet_greet`` and ``client_phone`` set to None mean
    "leave the stored value"; every other field overwrites, None included.
    """
    driver_id: str
    client_id: str | None = None
    company_id: str
    vehicle_type: VehicleType | None = None
    cnf: str | None = None
    flight_number: str | None = None
    meet_greet: str | None = None
    client_phone: str | None = None
    start_at: dt.datetime
    end_at: dt.datetime
    origin: str
    destination: str
    stop: str | None = None
    miles: float = Field(ge=0)
    duration_minutes: int = Field(ge=0)
    price: float = Field(ge=0)
    received: bool | None = None
    notes: str | None = None

    @field_validator("duration_minutes", mode="before")
    @classmethod
    def _whole_minutes(cls, v):
        # the form may send fractional minutes; stored as whole minutes
        if isinstance(v, float) and math.isfinite(v) and v >= 0:
            return round(v)
        return v

    @field_validator("start_at", "end_at")
    @classmethod
    def _dates_utc(cls, v: dt.datetime) -> dt.datetime:
        return as_utc(v)


class TripIn(TripFields):
    """Trip body as posted by the front end.

    ``client_id`` picks a registered client; without it ``client_name`` is
    resolved with find-or-create.
    """
    client_name: str | None = None


class Trip(Entity):
    created_by_user_id: str
    driver_id: str
    client_id: str | None = None
    company_id: str
    vehicle_type: VehicleType | None = None
    cnf: str | None = None
    flight_number: str | None = None
    meet_greet: str | None = None
    client_phone: str | None = None
    start_at: dt.datetime
    end_at: dt.datetime
    origin: str
    destination: str
    stop: str | None = None
    miles: float
    duration_minutes: int
    price: float
    received: bool = False
    notes: str | None = None

    @field_validator("start_at", "end_at")
    @classmethod
    def _dates_utc(cls, v: dt.datetime) -> dt.datetime:
        return as_utc(v)

    @field_validator("meet_greet", "client_phone")
    @classmethod
    def _blank_is_none(cls, v: str | None) -> str | None:
        return blank_to_none(v)


class ReceivedFlag(CamelModel):
    received: bool


class TripFilter(CamelModel):
    driver_id: str | None = None
    client_id: str | None = None
    company_id: str | None = None
    created_by_user_id: str | None = None
    cnf: str | None = None
    flight_number: str | None = None
    # bool: presence filter, str: substring
    meet_greet: bool | str | None = None

    def matches(self, t: Trip) -> bool:
        if self.created_by_user_id and t.created_by_user_id != self.created_by_user_id:
            return False
        if self.driver_id and t.driver_id != self.driver_id:
            return False
        if self.client_id and t.client_id != self.client_id:
            return False
        if self.company_id and t.company_id != self.company_id:
            return False
        if self.cnf and self.cnf.lower() not in (t.cnf or "").lower():
            return False
        if self.flight_number and self.flight_number.lower() not in (t.flight_number or "").lower():
            return False
        if isinstance(self.meet_greet, bool):
            if bool((t.meet_greet or "").strip()) != self.meet_greet:
                return False
        elif self.meet_greet and self.meet_greet.strip():
            if self.meet_greet.strip().lower() not in (t.meet_greet or "").lower():
                return False
        return True


# ---------- Dashboard ----------

class DashboardSummary(CamelModel):
    total_trips: int = 0
    total_revenue: float = 0
    total_miles: float = 0
    avg_duration_minutes: float = 0
