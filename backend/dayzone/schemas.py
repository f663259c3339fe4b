"""Pydantic schemas used across the backend API."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, computed_field
from pydantic.alias_generators import to_camel

from .models.enums import Currency, Direction, Period, Role
from .storage import public_url

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class ApiModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class TokenData(BaseModel):
    """Information encoded into JWTs."""

    user_id: int
    username: str


class UserLogin(ApiModel):
    """Credentials supplied during login."""

    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class UserCreate(ApiModel):
    """Payload for user registration."""

    username: Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=50)]
    password: Annotated[str, StringConstraints(min_length=6)]


class UserUpdate(ApiModel):
    """Admin-side profile change; omitted fields stay as they are."""

    username: Annotated[
        str, StringConstraints(strip_whitespace=True, min_length=3, max_length=50)
    ] | None = None
    password: Annotated[str, StringConstraints(min_length=6)] | None = None
    role: Role | None = None


class UserRead(ApiModel):
    """Public representation of a user."""

    id: int
    username: str
    role: Role
    created_at: datetime | None = None


class AuthResponse(ApiModel):
    """Issued token together with the user it belongs to."""

    user: UserRead
    token: str
    token_type: str = "bearer"
    expires_at: datetime


class VerifyResponse(ApiModel):
    valid: bool = True
    user: UserRead


class RoleInfo(ApiModel):
    value: Role
    label: str
    color: str


class OperativeWrite(ApiModel):
    """Full set of writable operative fields (create and update)."""

    callsign: NonEmptyStr
    full_name: NonEmptyStr
    face_id: NonEmptyStr
    role: Role | None = None
    note: str | None = None
    photo_ref: str | None = None


class OperativeRead(ApiModel):
    id: int
    callsign: str
    full_name: str
    face_id: str
    role: Role
    note: str | None = None
    photo_ref: str | None = None
    created_at: datetime
    updated_at: datetime

    @computed_field
    @property
    def photo(self) -> str | None:
        return public_url("stalkers", self.photo_ref)


class OperativeList(ApiModel):
    items: list[OperativeRead]
    total: int
    role: Role | None = None


class WantedWrite(ApiModel):
    """Full set of writable wanted-record fields (create and update)."""

    callsign: NonEmptyStr
    full_name: NonEmptyStr
    face_id: NonEmptyStr
    reward: Decimal = Field(ge=0, max_digits=15, decimal_places=2)
    last_seen: NonEmptyStr
    reason: NonEmptyStr
    role: Role = Role.NEUTRAL
    photo_ref: str | None = None


class WantedRead(ApiModel):
    id: int
    callsign: str
    full_name: str
    face_id: str
    reward: float
    last_seen: str
    reason: str
    role: Role
    photo_ref: str | None = None
    created_at: datetime
    updated_at: datetime

    @computed_field
    @property
    def photo(self) -> str | None:
        return public_url("wanted", self.photo_ref)


class WantedList(ApiModel):
    items: list[WantedRead]
    total: int


class LedgerEntryWrite(ApiModel):
    """Mutable ledger fields; an update overwrites all of them."""

    counterparty_label: NonEmptyStr
    direction: Direction
    amount: Decimal = Field(gt=0, max_digits=15, decimal_places=2)
    currency: Currency
    source: NonEmptyStr


class LedgerEntryRead(ApiModel):
    id: int
    owner_id: int
    counterparty_label: str
    direction: Direction
    amount: float
    currency: Currency
    source: str
    created_at: datetime


class LedgerPage(ApiModel):
    items: list[LedgerEntryRead]
    page: int
    page_size: int
    total: int
    total_pages: int


class BalanceRow(ApiModel):
    currency: Currency
    income: float
    expense: float
    balance: float


class BalanceResponse(ApiModel):
    balances: list[BalanceRow]


class StatisticsRow(ApiModel):
    currency: Currency
    direction: Direction
    count: int
    total_amount: float
    average_amount: float


class StatisticsResponse(ApiModel):
    period: Period
    statistics: list[StatisticsRow]


class MessageResponse(ApiModel):
    message: str
