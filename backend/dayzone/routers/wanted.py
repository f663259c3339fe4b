"""Wanted list endpoints; reading is open to any user, writing is admin only."""
import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_session
from ..dependencies import get_current_user, get_photo_store, require_admin
from ..models import User, WantedRecord
from ..repositories import WantedRepository
from ..schemas import MessageResponse, WantedList, WantedRead, WantedWrite
from ..storage import PhotoStore, release_unused

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/wanted", tags=["wanted"])


@router.get("/", response_model=WantedList, dependencies=[Depends(get_current_user)])
async def list_wanted(
    search_by: str | None = Query(default=None, alias="searchBy"),
    search_term: str | None = Query(default=None, alias="searchTerm"),
    session: AsyncSession = Depends(get_session),
) -> WantedList:
    items = await WantedRepository(session).list(search_by=search_by, search_term=search_term)
    return WantedList(
        items=[WantedRead.model_validate(item) for item in items],
        total=len(items),
    )


@router.get("/{wanted_id}", response_model=WantedRead, dependencies=[Depends(get_current_user)])
async def get_wanted(
    wanted_id: int, session: AsyncSession = Depends(get_session)
) -> WantedRecord:
    return await WantedRepository(session).get(wanted_id)


@router.post("/", response_model=WantedRead, status_code=status.HTTP_201_CREATED)
async def create_wanted(
    payload: WantedWrite,
    current_user: User = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
) -> WantedRecord:
    record = await WantedRepository(session).create(payload.model_dump())
    await session.commit()
    logger.info("wanted record %s created by %s", record.id, current_user.username)
    return record


@router.put("/{wanted_id}", response_model=WantedRead)
async def update_wanted(
    wanted_id: int,
    payload: WantedWrite,
    current_user: User = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
    photos: PhotoStore = Depends(get_photo_store),
) -> WantedRecord:
    repo = WantedRepository(session)
    existing = await repo.get(wanted_id)
    old_photo = existing.photo_ref
    data = payload.model_dump()
    if data["photo_ref"] is None:
        data["photo_ref"] = old_photo
    record = await repo.update(wanted_id, data)
    await session.commit()
    if old_photo and old_photo != record.photo_ref:
        await release_unused(photos, repo, old_photo)
    return record


@router.delete("/{wanted_id}", response_model=MessageResponse)
async def delete_wanted(
    wanted_id: int,
    current_user: User = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
    photos: PhotoStore = Depends(get_photo_store),
) -> MessageResponse:
    repo = WantedRepository(session)
    removed = await repo.delete(wanted_id)
    await session.commit()
    await release_unused(photos, repo, removed.photo_ref)
    logger.info("wanted record %s deleted by %s", wanted_id, current_user.username)
    return MessageResponse(message="Wanted record deleted")
