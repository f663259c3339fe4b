"""Faction-scoped operative ("stalker") profiles."""
from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin
from .enums import Role
from .user import enum_column


class Operative(TimestampMixin, Base):
    """A profile owned by one faction role."""

    __tablename__ = "stalkers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    callsign: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    full_name: Mapped[str] = mapped_column(String(255), index=True)
    face_id: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    role: Mapped[Role] = mapped_column(enum_column(Role), default=Role.NEUTRAL, index=True)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    photo_ref: Mapped[str | None] = mapped_column(String(500), nullable=True)
