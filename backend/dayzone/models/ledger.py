"""Per-user financial ledger entries."""
from datetime import datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, utcnow
from .enums import Currency, Direction
from .user import enum_column


class LedgerEntry(Base):
    """A single credit or debit owned by exactly one user."""

    __tablename__ = "financial_operations"

    __table_args__ = (
        CheckConstraint("amount > 0", name="amount_positive"),
        Index("ix_financial_owner_created", "owner_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    owner_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    counterparty_label: Mapped[str] = mapped_column(String(100))
    direction: Mapped[Direction] = mapped_column(enum_column(Direction, length=10))
    amount: Mapped[Decimal] = mapped_column(Numeric(15, 2))
    currency: Mapped[Currency] = mapped_column(enum_column(Currency, length=10))
    source: Mapped[str] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)
