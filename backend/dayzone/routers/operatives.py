"""Faction-scoped operative endpoints."""
import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_session
from ..dependencies import get_current_user, get_photo_store
from ..models import Operative, Role, User
from ..models.enums import FACTION_DISPLAY
from ..policy import can_mutate_operative, can_view_operatives, ensure, is_admin
from ..repositories import OperativeRepository
from ..schemas import MessageResponse, OperativeList, OperativeRead, OperativeWrite, RoleInfo
from ..storage import PhotoStore, release_unused

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/operatives", tags=["operatives"])


async def _list_for_role(
    session: AsyncSession,
    current_user: User,
    role: Role | None,
    search_by: str | None,
    search_term: str | None,
) -> OperativeList:
    if role is None:
        # Admins see every faction at once; everyone else defaults to their own.
        if not is_admin(current_user.role):
            role = current_user.role
    else:
        ensure(
            can_view_operatives(current_user.role, role),
            "You can only view operatives of your own faction",
        )
    items = await OperativeRepository(session).list(
        search_by=search_by, search_term=search_term, role=role
    )
    return OperativeList(
        items=[OperativeRead.model_validate(item) for item in items],
        total=len(items),
        role=role,
    )


@router.get("/", response_model=OperativeList)
async def list_operatives(
    role: Role | None = None,
    search_by: str | None = Query(default=None, alias="searchBy"),
    search_term: str | None = Query(default=None, alias="searchTerm"),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> OperativeList:
    """Operatives visible to the caller, newest first."""

    return await _list_for_role(session, current_user, role, search_by, search_term)


@router.get("/roles/list", response_model=list[RoleInfo])
async def list_roles(current_user: User = Depends(get_current_user)) -> list[RoleInfo]:
    return [
        RoleInfo(value=role, label=label, color=color)
        for role, (label, color) in FACTION_DISPLAY.items()
    ]


@router.get("/role/{role}", response_model=OperativeList)
async def list_operatives_by_role(
    role: Role,
    search_by: str | None = Query(default=None, alias="searchBy"),
    search_term: str | None = Query(default=None, alias="searchTerm"),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> OperativeList:
    return await _list_for_role(session, current_user, role, search_by, search_term)


@router.get("/{operative_id}", response_model=OperativeRead)
async def get_operative(
    operative_id: int,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> Operative:
    operative = await OperativeRepository(session).get(operative_id)
    ensure(
        can_view_operatives(current_user.role, operative.role),
        "You can only view operatives of your own faction",
    )
    return operative


def _target_role(current_user: User, requested: Role | None) -> Role:
    """Role a written record ends up in; non-admins can never leave their own."""

    role = requested or current_user.role
    ensure(
        can_mutate_operative(current_user.role, role),
        "You can only manage operatives of your own faction",
    )
    return role


@router.post("/", response_model=OperativeRead, status_code=status.HTTP_201_CREATED)
async def create_operative(
    payload: OperativeWrite,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> Operative:
    data = payload.model_dump()
    data["role"] = _target_role(current_user, payload.role)
    operative = await OperativeRepository(session).create(data)
    await session.commit()
    logger.info("operative %s created by %s", operative.id, current_user.username)
    return operative


@router.put("/{operative_id}", response_model=OperativeRead)
async def update_operative(
    operative_id: int,
    payload: OperativeWrite,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    photos: PhotoStore = Depends(get_photo_store),
) -> Operative:
    """Overwrite an operative; a replaced photo is released, an omitted one is kept."""

    repo = OperativeRepository(session)
    existing = await repo.get(operative_id)
    ensure(
        can_mutate_operative(current_user.role, existing.role),
        "You can only manage operatives of your own faction",
    )
    data = payload.model_dump()
    data["role"] = _target_role(current_user, payload.role or existing.role)
    old_photo = existing.photo_ref
    if data["photo_ref"] is None:
        data["photo_ref"] = old_photo
    operative = await repo.update(operative_id, data)
    await session.commit()
    if old_photo and old_photo != operative.photo_ref:
        await release_unused(photos, repo, old_photo)
    return operative


@router.delete("/{operative_id}", response_model=MessageResponse)
async def delete_operative(
    operative_id: int,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    photos: PhotoStore = Depends(get_photo_store),
) -> MessageResponse:
    repo = OperativeRepository(session)
    existing = await repo.get(operative_id)
    ensure(
        can_mutate_operative(current_user.role, existing.role),
        "You can only manage operatives of your own faction",
    )
    removed = await repo.delete(operative_id)
    await session.commit()
    await release_unused(photos, repo, removed.photo_ref)
    logger.info("operative %s deleted by %s", operative_id, current_user.username)
    return MessageResponse(message="Operative deleted")
