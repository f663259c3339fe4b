"""Admin-only user management."""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_session
from ..dependencies import get_current_user, require_admin
from ..models import User
from ..policy import can_delete_user, can_mutate_user, ensure
from ..repositories import UserRepository
from ..schemas import MessageResponse, UserRead, UserUpdate
from ..security import hash_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/", response_model=list[UserRead], dependencies=[Depends(require_admin)])
async def list_users(session: AsyncSession = Depends(get_session)):
    return await UserRepository(session).list()


@router.put("/{user_id}", response_model=UserRead)
async def update_user(
    user_id: int,
    payload: UserUpdate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> User:
    """Change a user's username, role or password (admin only)."""

    ensure(can_mutate_user(current_user.role), "Administrator role required")
    changes = payload.model_dump(exclude_none=True, exclude={"password"})
    if payload.password is not None:
        changes["password_hash"] = hash_password(payload.password)
    user = await UserRepository(session).update(user_id, changes)
    await session.commit()
    logger.info("user id=%s updated by %s: %s", user_id, current_user.username, sorted(changes))
    return user


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: int,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> MessageResponse:
    """Delete a user and their ledger; nobody may delete their own account."""

    ensure(
        can_delete_user(current_user.role, current_user.id, user_id),
        "You cannot delete this account",
    )
    await UserRepository(session).delete(user_id)
    await session.commit()
    logger.info("user id=%s deleted by %s", user_id, current_user.username)
    return MessageResponse(message="User deleted")
