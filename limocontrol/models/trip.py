# limocontrol/models/trip.py
from sqlalchemy import (
    Column, Integer, String, Text, Float, DateTime, Boolean, ForeignKey, Index
)
from sqlalchemy.sql import func
from .base import Base

class TripRow(Base):
    __tablename__ = "trips"

    id = Column(String, primary_key=True)

    # RESTRICT: the database refuses to orphan a trip even if a guard is raced
    created_by_user_id = Column(String, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    driver_id  = Column(String, ForeignKey("drivers.id", ondelete="RESTRICT"), nullable=False)
    client_id  = Column(String, ForeignKey("clients.id", ondelete="RESTRICT"), nullable=True)
    company_id = Column(String, ForeignKey("companies.id", ondelete="RESTRICT"), nullable=False)

    vehicle_type  = Column(String(20), nullable=True)   # SUV / Sedan / Economy
    cnf           = Column(String, nullable=True)
    flight_number = Column(String, nullable=True)
    meet_greet    = Column(Text, nullable=False, default="", server_default="")  # '' = no meet & greet
    client_phone  = Column(String, nullable=True)

    start_at = Column(DateTime(timezone=True), nullable=False)
    end_at   = Column(DateTime(timezone=True), nullable=False)
    origin      = Column(String, nullable=False)
    destination = Column(String, nullable=False)
    stop        = Column(String, nullable=True)

    miles            = Column(Float, nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    price            = Column(Float, nullable=False)

    received = Column(Boolean, default=False, nullable=False)
    notes    = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        Index("ix_trips_driver_id", "driver_id"),
        Index("ix_trips_client_id", "client_id"),
        Index("ix_trips_company_id", "company_id"),
        Index("ix_trips_start_at", "start_at"),
        Index("ix_trips_cnf", "cnf"),
        Index("ix_trips_flight_number", "flight_number"),
        Index("ix_trips_meet_greet", "meet_greet"),
    )
