from .base import Base
from .user import UserRow
from .driver import DriverRow
from .client import ClientRow
from .company import CompanyRow
from .trip import TripRow

__all__ = ["Base", "UserRow", "DriverRow", "ClientRow", "CompanyRow", "TripRow"]
