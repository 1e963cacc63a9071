# limocontrol/models/client.py
from sqlalchemy import Column, Boolean, String, DateTime
from sqlalchemy.sql import func
from .base import Base

class ClientRow(Base):
    __tablename__ = "clients"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False, index=True)
    phone = Column(String, nullable=True)
    address = Column(String, nullable=True)
    active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
