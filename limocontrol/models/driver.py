# limocontrol/models/driver.py
from sqlalchemy import Column, Boolean, String, DateTime
from sqlalchemy.sql import func
from .base import Base

class DriverRow(Base):
    __tablename__ = "drivers"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    license = Column(String, nullable=True)
    active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
