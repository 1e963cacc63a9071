# limocontrol/models/user.py
from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from .base import Base

class UserRow(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False)   # always stored lower-case
    password_hash = Column(String, nullable=False)        # bcrypt; legacy rows may hold plaintext
    role = Column(String, nullable=False, default="user") # 'admin' / 'user'
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
