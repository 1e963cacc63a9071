"""Durable backing on SQLAlchemy; every guarded write runs in one transaction."""
from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from ..db import make_engine, make_session_factory
from ..errors import conflict, invalid, not_found
from ..logging_config import get_logger
from ..models import Base, ClientRow, CompanyRow, DriverRow, TripRow, UserRow
from ..schemas import (
    Client, ClientFields, Company, DashboardSummary, Driver, SafeUser, Trip, TripFilter, User,
)
from . import integrity
from .base import (
    ClientRepository, DashboardRepository, DirectoryRepository, Store, TripRepository,
    UserRepository, new_id, utcnow,
)

logger = get_logger(__name__)

_SPARSE_TRIP_FIELDS = ("received", "meet_greet", "client_phone")


def _to_entity(model, row):
    return model.model_validate({name: getattr(row, name) for name in model.model_fields})


def _contains(value: str) -> str:
    # LIKE pattern matching ``value`` literally
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class _SqlDirectory(DirectoryRepository):
    def __init__(self, sf: sessionmaker, kind: str, orm, model, prefix: str) -> None:
        self._sf = sf
        self.kind = kind
        self._orm = orm
        self._model = model
        self._prefix = prefix
        self._link = getattr(TripRow, integrity.TRIP_LINKS[kind])

    def list(self):
        with self._sf() as db:
            rows = db.execute(select(self._orm).order_by(self._orm.created_at.desc())).scalars().all()
            return [_to_entity(self._model, r) for r in rows]

    def exists(self, record_id):
        with self._sf() as db:
            return db.execute(select(self._orm.id).where(self._orm.id == record_id).limit(1)).first() is not None

    def get(self, record_id):
        with self._sf() as db:
            row = db.get(self._orm, record_id)
            return _to_entity(self._model, row) if row else None

    def _insert(self, db: Session, fields):
        row = self._orm(id=new_id(self._prefix), created_at=utcnow(), active=True, **fields.model_dump())
        db.add(row)
        db.flush()
        return _to_entity(self._model, row)

    def create(self, fields):
        with self._sf.begin() as db:
            return self._insert(db, fields)

    def update(self, record_id, fields):
        with self._sf.begin() as db:
            row = db.get(self._orm, record_id)
            if row is None:
                return self._not_found()
            for key, value in fields.model_dump().items():
                setattr(row, key, value)
            db.flush()
            return _to_entity(self._model, row)

    def set_active(self, record_id, active):
        with self._sf.begin() as db:
            row = db.get(self._orm, record_id)
            if row is None:
                return self._not_found()
            row.active = bool(active)
            db.flush()
            return _to_entity(self._model, row)

    def delete(self, record_id):
        try:
            with self._sf.begin() as db:
                row = db.get(self._orm, record_id, with_for_update=True)
                if row is None:
                    return self._not_found()
                linked = db.execute(select(TripRow.id).where(self._link == record_id).limit(1)).first()
                if linked is not None:
                    logger.info("refusing to delete %s %s: linked trips", self.kind, record_id)
                    return self._in_use()
                rec = _to_entity(self._model, row)
                db.delete(row)
                db.flush()
                return rec
        except IntegrityError:
            # a trip was linked between the check and the delete
            logger.info("delete of %s %s blocked by foreign key", self.kind, record_id)
            return self._in_use()


class _SqlClients(_SqlDirectory, ClientRepository):
    def find_or_create_by_name(self, name):
        normalized = (name or "").strip()
        if not normalized:
            return invalid("Client name is required")
        with self._sf.begin() as db:
            row = db.execute(
                select(ClientRow)
                .where(func.lower(func.trim(ClientRow.name)) == normalized.lower())
                .order_by(ClientRow.created_at)
                .limit(1)
            ).scalars().first()
            if row is not None:
                return _to_entity(Client, row)
            return self._insert(db, ClientFields.model_construct(name=normalized, phone=None, address=None))


class _SqlUsers(UserRepository):
    def __init__(self, sf: sessionmaker) -> None:
        self._sf = sf

    @staticmethod
    def _by_email(db: Session, email: str):
        return db.execute(
            select(UserRow).where(func.lower(UserRow.email) == email.lower()).limit(1)
        ).scalars().first()

    def find_by_email(self, email):
        with self._sf() as db:
            row = self._by_email(db, email or "")
            return _to_entity(User, row) if row else None

    def get(self, user_id):
        with self._sf() as db:
            row = db.get(UserRow, user_id)
            return _to_entity(User, row) if row else None

    def count(self):
        with self._sf() as db:
            return db.execute(select(func.count(UserRow.id))).scalar_one()

    def list_safe(self):
        with self._sf() as db:
            rows = db.execute(select(UserRow).order_by(UserRow.created_at.desc())).scalars().all()
            return [_to_entity(SafeUser, r) for r in rows]

    def create(self, name, email, password_hash, role):
        email = email.lower()
        try:
            with self._sf.begin() as db:
                if self._by_email(db, email) is not None:
                    return conflict("Email already exists")
                row = UserRow(id=new_id("u"), created_at=utcnow(), name=name, email=email,
                              password_hash=password_hash, role=role)
                db.add(row)
                db.flush()
                return _to_entity(SafeUser, row)
        except IntegrityError:
            return conflict("Email already exists")

    def _patch(self, user_id, changes):
        with self._sf.begin() as db:
            row = db.get(UserRow, user_id)
            if row is None:
                return not_found("User not found")
            for key, value in changes.items():
                setattr(row, key, value)
            db.flush()
            return _to_entity(SafeUser, row)

    def update(self, user_id, name=None, role=None):
        changes = {k: v for k, v in (("name", name), ("role", role)) if v is not None}
        return self._patch(user_id, changes)

    def set_password_hash(self, user_id, password_hash):
        return self._patch(user_id, {"password_hash": password_hash})

    def delete(self, user_id):
        try:
            with self._sf.begin() as db:
                row = db.get(UserRow, user_id, with_for_update=True)
                if row is None:
                    return not_found("User not found")
                owns = db.execute(
                    select(TripRow.id).where(TripRow.created_by_user_id == user_id).limit(1)
                ).first()
                if owns is not None:
                    logger.info("refusing to delete user %s: owns trips", user_id)
                    return conflict("Cannot delete user with trips")
                rec = _to_entity(SafeUser, row)
                db.delete(row)
                db.flush()
                return rec
        except IntegrityError:
            logger.info("delete of user %s blocked by foreign key", user_id)
            return conflict("Cannot delete user with trips")


class _SqlTrips(TripRepository):
    def __init__(self, sf: sessionmaker) -> None:
        self._sf = sf

    @staticmethod
    def _check_links(db: Session, fields):
        return integrity.check_trip_links(
            fields,
            driver_exists=lambda i: db.get(DriverRow, i) is not None,
            company_exists=lambda i: db.get(CompanyRow, i) is not None,
            client_exists=lambda i: db.get(ClientRow, i) is not None,
        )

    def list(self, flt=None):
        flt = flt or TripFilter()
        stmt = select(TripRow)
        if flt.created_by_user_id:
            stmt = stmt.where(TripRow.created_by_user_id == flt.created_by_user_id)
        if flt.driver_id:
            stmt = stmt.where(TripRow.driver_id == flt.driver_id)
        if flt.client_id:
            stmt = stmt.where(TripRow.client_id == flt.client_id)
        if flt.company_id:
            stmt = stmt.where(TripRow.company_id == flt.company_id)
        if flt.cnf:
            stmt = stmt.where(TripRow.cnf.ilike(_contains(flt.cnf), escape="\\"))
        if flt.flight_number:
            stmt = stmt.where(TripRow.flight_number.ilike(_contains(flt.flight_number), escape="\\"))
        if isinstance(flt.meet_greet, bool):
            present = func.trim(func.coalesce(TripRow.meet_greet, "")) != ""
            stmt = stmt.where(present if flt.meet_greet else ~present)
        elif flt.meet_greet and flt.meet_greet.strip():
            stmt = stmt.where(TripRow.meet_greet.ilike(_contains(flt.meet_greet.strip()), escape="\\"))
        stmt = stmt.order_by(TripRow.start_at.desc())
        with self._sf() as db:
            return [_to_entity(Trip, r) for r in db.execute(stmt).scalars().all()]

    def get(self, trip_id):
        with self._sf() as db:
            row = db.get(TripRow, trip_id)
            return _to_entity(Trip, row) if row else None

    def create(self, fields, created_by_user_id):
        try:
            with self._sf.begin() as db:
                if db.get(UserRow, created_by_user_id) is None:
                    return invalid("User not found")
                failure = self._check_links(db, fields)
                if failure:
                    return failure
                data = fields.model_dump()
                data["received"] = bool(data.get("received") or False)
                data["meet_greet"] = data.get("meet_greet") or ""
                row = TripRow(id=new_id("t"), created_at=utcnow(), created_by_user_id=created_by_user_id, **data)
                db.add(row)
                db.flush()
                return _to_entity(Trip, row)
        except IntegrityError:
            return invalid("Trip references a missing record")

    def update(self, trip_id, fields):
        try:
            with self._sf.begin() as db:
                row = db.get(TripRow, trip_id)
                if row is None:
                    return not_found("Trip not found")
                failure = self._check_links(db, fields)
                if failure:
                    return failure
                for key, value in fields.model_dump(exclude=set(_SPARSE_TRIP_FIELDS)).items():
                    setattr(row, key, value)
                for key in _SPARSE_TRIP_FIELDS:
                    value = getattr(fields, key)
                    if value is not None:
                        setattr(row, key, value)
                db.flush()
                return _to_entity(Trip, row)
        except IntegrityError:
            return invalid("Trip references a missing record")

    def set_received(self, trip_id, received):
        with self._sf.begin() as db:
            row = db.get(TripRow, trip_id)
            if row is None:
                return not_found("Trip not found")
            row.received = bool(received)
            db.flush()
            return _to_entity(Trip, row)

    def delete(self, trip_id):
        with self._sf.begin() as db:
            row = db.get(TripRow, trip_id, with_for_update=True)
            if row is None:
                return not_found("Trip not found")
            trip = _to_entity(Trip, row)
            failure = integrity.check_trip_deletable(trip)
            if failure:
                logger.info("refusing to delete trip %s: already received", trip_id)
                return failure
            db.delete(row)
            db.flush()
            return trip


class _SqlDashboard(DashboardRepository):
    def __init__(self, sf: sessionmaker) -> None:
        self._sf = sf

    def summary(self, created_by_user_id=None):
        stmt = select(
            func.count(TripRow.id),
            func.coalesce(func.sum(TripRow.price), 0),
            func.coalesce(func.sum(TripRow.miles), 0),
            func.coalesce(func.avg(TripRow.duration_minutes), 0),
        )
        if created_by_user_id:
            stmt = stmt.where(TripRow.created_by_user_id == created_by_user_id)
        with self._sf() as db:
            total, revenue, miles, avg = db.execute(stmt).one()
        return DashboardSummary(
            total_trips=int(total or 0),
            total_revenue=float(revenue or 0),
            total_miles=float(miles or 0),
            avg_duration_minutes=round(float(avg or 0), 2),
        )


class SqlStore(Store):
    backend = "sql"

    def __init__(self, database_url: str | None = None, engine=None) -> None:
        self.engine = engine if engine is not None else make_engine(database_url)
        sf = make_session_factory(self.engine)
        self.users = _SqlUsers(sf)
        self.drivers = _SqlDirectory(sf, "driver", DriverRow, Driver, "d")
        self.clients = _SqlClients(sf, "client", ClientRow, Client, "c")
        self.companies = _SqlDirectory(sf, "company", CompanyRow, Company, "co")
        self.trips = _SqlTrips(sf)
        self.dashboard = _SqlDashboard(sf)

    def init(self) -> None:
        # handy for development; managed databases go through alembic
        Base.metadata.create_all(bind=self.engine)

    def close(self) -> None:
        self.engine.dispose()
