"""Admin-managed bounty list."""
from decimal import Decimal

from sqlalchemy import Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin
from .enums import Role
from .user import enum_column


class WantedRecord(TimestampMixin, Base):
    """A wanted person; ``face_id`` is unique among wanted records only."""

    __tablename__ = "wanted_stalkers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    callsign: Mapped[str] = mapped_column(String(100), index=True)
    full_name: Mapped[str] = mapped_column(String(255))
    face_id: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    role: Mapped[Role] = mapped_column(enum_column(Role), default=Role.NEUTRAL)
    reward: Mapped[Decimal] = mapped_column(Numeric(15, 2))
    last_seen: Mapped[str] = mapped_column(String(255))
    reason: Mapped[str] = mapped_column(Text)
    photo_ref: Mapped[str | None] = mapped_column(String(500), nullable=True)
