"""Read-only aggregates over a user's ledger entries."""
from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Currency, Direction, LedgerEntry, Period
from ..models.base import utcnow
from ..repositories.base import coerce_enum

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class CurrencyBalance:
    currency: Currency
    income: Decimal
    expense: Decimal
    balance: Decimal


@dataclass(frozen=True)
class DirectionStatistics:
    currency: Currency
    direction: Direction
    count: int
    total_amount: Decimal
    average_amount: Decimal


@dataclass(frozen=True)
class LedgerPage:
    items: Sequence[LedgerEntry]
    page: int
    page_size: int
    total: int
    total_pages: int


def _decimal(value: Any) -> Decimal:
    return Decimal(str(value)) if value is not None else Decimal(0)


def _positive_int(value: Any, default: int) -> int:
    """Coerce paging input to an int of at least 1."""
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return max(number, 1)


class LedgerAggregator:
    """
    Balances, statistics and paging for one owner at a time.

    Every statement filters on ``owner_id`` first; no combination of the
    optional filters can reach another user's entries.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def balance(self, owner_id: int) -> list[CurrencyBalance]:
        """Income, expense and balance per currency the owner has used."""

        income = func.sum(
            case((LedgerEntry.direction == Direction.CREDIT, LedgerEntry.amount), else_=0)
        )
        expense = func.sum(
            case((LedgerEntry.direction == Direction.DEBIT, LedgerEntry.amount), else_=0)
        )
        stmt = (
            select(LedgerEntry.currency, income, expense)
            .where(LedgerEntry.owner_id == owner_id)
            .group_by(LedgerEntry.currency)
            .order_by(LedgerEntry.currency)
        )
        rows = (await self.session.execute(stmt)).all()
        balances = []
        for currency, income_total, expense_total in rows:
            income_total = _decimal(income_total)
            expense_total = _decimal(expense_total)
            balances.append(
                CurrencyBalance(
                    currency=Currency(currency),
                    income=income_total,
                    expense=expense_total,
                    balance=income_total - expense_total,
                )
            )
        return balances

    async def statistics(
        self,
        owner_id: int,
        period: Period | str = Period.MONTH,
        now: datetime | None = None,
    ) -> list[DirectionStatistics]:
        """
        Count, total and average per (currency, direction) inside the window.

        The window's lower bound is inclusive: an entry created exactly
        ``period.days`` ago is counted.
        """
        period = coerce_enum(Period, "period", period)
        stmt = (
            select(
                LedgerEntry.currency,
                LedgerEntry.direction,
                func.count(LedgerEntry.id),
                func.sum(LedgerEntry.amount),
            )
            .where(LedgerEntry.owner_id == owner_id)
            .group_by(LedgerEntry.currency, LedgerEntry.direction)
            .order_by(LedgerEntry.currency, LedgerEntry.direction)
        )
        if period.days is not None:
            since = (now or utcnow()) - timedelta(days=period.days)
            stmt = stmt.where(LedgerEntry.created_at >= since)

        statistics = []
        for currency, direction, count, total in (await self.session.execute(stmt)).all():
            if not count:
                continue
            total = _decimal(total)
            statistics.append(
                DirectionStatistics(
                    currency=Currency(currency),
                    direction=Direction(direction),
                    count=count,
                    total_amount=total,
                    average_amount=total / count,
                )
            )
        return statistics

    async def list_paged(
        self,
        owner_id: int,
        page: Any = 1,
        page_size: Any = DEFAULT_PAGE_SIZE,
        direction: Direction | str | None = None,
        currency: Currency | str | None = None,
    ) -> LedgerPage:
        """Newest-first page of entries; page and size clamp to 1, size caps at MAX_PAGE_SIZE."""

        page = _positive_int(page, 1)
        page_size = min(_positive_int(page_size, 1), MAX_PAGE_SIZE)

        conditions = [LedgerEntry.owner_id == owner_id]
        if direction is not None:
            conditions.append(
                LedgerEntry.direction == coerce_enum(Direction, "direction", direction)
            )
        if currency is not None:
            conditions.append(
                LedgerEntry.currency == coerce_enum(Currency, "currency", currency)
            )

        total = await self.session.scalar(
            select(func.count(LedgerEntry.id)).where(*conditions)
        ) or 0
        offset = (page - 1) * page_size
        items: Sequence[LedgerEntry] = []
        # pages past the end skip the query
        if offset < total:
            stmt = (
                select(LedgerEntry)
                .where(*conditions)
                .order_by(LedgerEntry.created_at.desc(), LedgerEntry.id.desc())
                .limit(page_size)
                .offset(offset)
            )
            items = (await self.session.scalars(stmt)).all()
        return LedgerPage(
            items=items,
            page=page,
            page_size=page_size,
            total=total,
            total_pages=math.ceil(total / page_size),
        )

