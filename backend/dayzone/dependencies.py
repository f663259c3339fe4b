"""Reusable FastAPI dependencies."""
from __future__ import annotations

import logging

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from .database import get_session
from .errors import InvalidToken, MissingToken, UserNotFound
from .models import User
from .policy import ensure, is_admin
from .repositories import UserRepository
from .security import TokenService
from .storage import PhotoStore

logger = logging.getLogger(__name__)

# Use simple Bearer auth instead of OAuth2 password flow
bearer_scheme = HTTPBearer(auto_error=False)


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_photo_store(request: Request) -> PhotoStore:
    return request.app.state.photo_store


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: AsyncSession = Depends(get_session),
    tokens: TokenService = Depends(get_token_service),
) -> User:
    """
    Return the authenticated user from a JWT access token
    taken from the Authorization: Bearer <token> header.

    The user is re-read from the database on every request, so a token
    of a deleted account stops working immediately.
    """

    if credentials is None or credentials.scheme.lower() != "bearer":
        raise MissingToken()

    try:
        token_data = tokens.verify(credentials.credentials)
    except InvalidToken as exc:
        logger.info("rejected token: %s", exc.reason)
        raise

    user = await UserRepository(session).get_by_id(token_data.user_id)
    if user is None:
        logger.warning(
            "token for missing user id=%s username=%s",
            token_data.user_id,
            token_data.username,
        )
        raise UserNotFound()

    return user


async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Ensure the current user has the admin role."""

    ensure(is_admin(current_user.role), "Administrator role required")
    return current_user
