"""Authentication routes."""
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from .database import get_session
from .dependencies import get_current_user, get_token_service
from .errors import InvalidCredentials
from .models import Role, User
from .repositories import UserRepository
from .schemas import AuthResponse, UserCreate, UserLogin, UserRead, VerifyResponse
from .security import TokenService, hash_password, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_response(user: User, tokens: TokenService) -> AuthResponse:
    return AuthResponse(
        user=UserRead.model_validate(user),
        token=tokens.issue(user.id, user.username),
        expires_at=tokens.expiry(),
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register_user(
    payload: UserCreate,
    session: AsyncSession = Depends(get_session),
    tokens: TokenService = Depends(get_token_service),
) -> AuthResponse:
    """Create a Neutral user account and sign them in."""

    user = await UserRepository(session).create(
        username=payload.username,
        password_hash=hash_password(payload.password),
        role=Role.NEUTRAL,
    )
    await session.commit()
    logger.info("registered user %s (id=%s)", user.username, user.id)
    return _auth_response(user, tokens)


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: UserLogin,
    session: AsyncSession = Depends(get_session),
    tokens: TokenService = Depends(get_token_service),
) -> AuthResponse:
    """Authenticate a user and return a JWT access token."""

    user = await UserRepository(session).get_by_username(payload.username)
    if user is None or not verify_password(payload.password, user.password_hash):
        logger.info("failed login for %s", payload.username)
        raise InvalidCredentials()
    return _auth_response(user, tokens)


@router.get("/me", response_model=UserRead)
async def me(current_user: User = Depends(get_current_user)) -> User:
    return current_user


@router.get("/verify", response_model=VerifyResponse)
async def verify(current_user: User = Depends(get_current_user)) -> VerifyResponse:
    """Report whether the presented token is still usable."""

    return VerifyResponse(user=UserRead.model_validate(current_user))
