"""User accounts and their faction role."""
from sqlalchemy import Enum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin
from .enums import Role


def enum_column(enum_cls, length: int = 20) -> Enum:
    """Store an Enum by value in a plain VARCHAR column."""

    return Enum(
        enum_cls,
        native_enum=False,
        length=length,
        values_callable=lambda members: [m.value for m in members],
    )


class User(TimestampMixin, Base):
    """Application user; the role decides which operative records are visible."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    username: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255))
    role: Mapped[Role] = mapped_column(enum_column(Role), default=Role.NEUTRAL)
