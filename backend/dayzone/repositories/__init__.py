from .ledger import LedgerRepository
from .operative import OperativeRepository
from .user import UserRepository
from .wanted import WantedRepository

__all__ = ["LedgerRepository", "OperativeRepository", "UserRepository", "WantedRepository"]
