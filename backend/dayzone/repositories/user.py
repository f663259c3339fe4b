from collections.abc import Sequence
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import Conflict, NotFound
from ..models import LedgerEntry, Role, User
from .base import apply_dict_updates

USERNAME_TAKEN = "A user with this username already exists"


class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def _flush(self) -> None:
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise Conflict(USERNAME_TAKEN) from exc

    async def get_by_id(self, user_id: int) -> User | None:
        """Retrieves a User by their primary ID."""
        return await self.session.get(User, user_id, populate_existing=True)

    async def get(self, user_id: int) -> User:
        user = await self.get_by_id(user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    async def get_by_username(self, username: str) -> User | None:
        stmt = select(User).where(User.username == username)
        return (await self.session.scalars(stmt)).one_or_none()

    async def list(self) -> Sequence[User]:
        stmt = select(User).order_by(User.created_at.desc(), User.id.desc())
        return (await self.session.scalars(stmt)).all()

    async def create(self, username: str, password_hash: str, role: Role = Role.NEUTRAL) -> User:
        if await self.get_by_username(username) is not None:
            raise Conflict(USERNAME_TAKEN)
        user = User(username=username, password_hash=password_hash, role=role)
        self.session.add(user)
        await self._flush()
        return user

    async def update(self, user_id: int, update_data: dict[str, Any]) -> User:
        """Apply profile changes; ``update_data`` may carry a new password hash."""

        user = await self.get(user_id)
        username = update_data.get("username")
        if username and username != user.username:
            if await self.get_by_username(username) is not None:
                raise Conflict(USERNAME_TAKEN)
        apply_dict_updates(
            user,
            {key: value for key, value in update_data.items() if value is not None},
            excluded_attrs={"id", "created_at", "updated_at"},
        )
        await self._flush()
        await self.session.refresh(user)
        return user

    async def delete(self, user_id: int) -> None:
        """Delete a user together with every ledger entry they own."""

        user = await self.get(user_id)
        await self.session.execute(delete(LedgerEntry).where(LedgerEntry.owner_id == user.id))
        await self.session.delete(user)
        await self.session.flush()
