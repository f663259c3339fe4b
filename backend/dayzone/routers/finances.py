"""Per-user ledger endpoints. Every query is scoped to the caller."""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_session
from ..dependencies import get_current_user
from ..models import Currency, Direction, LedgerEntry, Period, User
from ..repositories import LedgerRepository
from ..schemas import (
    BalanceResponse,
    BalanceRow,
    LedgerEntryRead,
    LedgerEntryWrite,
    LedgerPage,
    MessageResponse,
    StatisticsResponse,
    StatisticsRow,
)
from ..services.ledger import DEFAULT_PAGE_SIZE, LedgerAggregator

router = APIRouter(prefix="/finances", tags=["finances"])


@router.get("/operations", response_model=LedgerPage)
async def list_operations(
    page: int = 1,
    page_size: int = Query(default=DEFAULT_PAGE_SIZE, alias="pageSize"),
    direction: Direction | None = None,
    currency: Currency | None = None,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> LedgerPage:
    result = await LedgerAggregator(session).list_paged(
        current_user.id, page, page_size, direction=direction, currency=currency
    )
    return LedgerPage(
        items=[LedgerEntryRead.model_validate(item) for item in result.items],
        page=result.page,
        page_size=result.page_size,
        total=result.total,
        total_pages=result.total_pages,
    )


@router.get("/operations/{operation_id}", response_model=LedgerEntryRead)
async def get_operation(
    operation_id: int,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> LedgerEntry:
    return await LedgerRepository(session, current_user.id).get(operation_id)


@router.post("/operations", response_model=LedgerEntryRead, status_code=status.HTTP_201_CREATED)
async def create_operation(
    payload: LedgerEntryWrite,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> LedgerEntry:
    entry = await LedgerRepository(session, current_user.id).create(payload.model_dump())
    await session.commit()
    return entry


@router.put("/operations/{operation_id}", response_model=LedgerEntryRead)
async def update_operation(
    operation_id: int,
    payload: LedgerEntryWrite,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> LedgerEntry:
    entry = await LedgerRepository(session, current_user.id).update(
        operation_id, payload.model_dump()
    )
    await session.commit()
    return entry


@router.delete("/operations/{operation_id}", response_model=MessageResponse)
async def delete_operation(
    operation_id: int,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> MessageResponse:
    await LedgerRepository(session, current_user.id).delete(operation_id)
    await session.commit()
    return MessageResponse(message="Operation deleted")


@router.get("/balance", response_model=BalanceResponse)
async def get_balance(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> BalanceResponse:
    rows = await LedgerAggregator(session).balance(current_user.id)
    return BalanceResponse(balances=[BalanceRow.model_validate(row) for row in rows])


@router.get("/statistics", response_model=StatisticsResponse)
async def get_statistics(
    period: Period = Period.MONTH,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> StatisticsResponse:
    rows = await LedgerAggregator(session).statistics(current_user.id, period)
    return StatisticsResponse(
        period=period,
        statistics=[StatisticsRow.model_validate(row) for row in rows],
    )
