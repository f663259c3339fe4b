"""SQLAlchemy models exposed by the backend."""
from .base import Base
from .enums import Currency, Direction, Period, Role
from .ledger import LedgerEntry
from .operative import Operative
from .user import User
from .wanted import WantedRecord

__all__ = [
    "Base",
    "Currency",
    "Direction",
    "LedgerEntry",
    "Operative",
    "Period",
    "Role",
    "User",
    "WantedRecord",
]
