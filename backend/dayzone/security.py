"""Password hashing and signed session tokens."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt
from passlib.context import CryptContext
from pydantic import ValidationError as PydanticValidationError

from .errors import MalformedToken, SignatureMismatch, TokenExpired
from .schemas import TokenData

ALGORITHM = "HS256"

password_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    """Return the value stored in ``users.password_hash``."""
    return password_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """
    Compare a login password with a stored hash.

    A stored value passlib cannot identify counts as a mismatch, so a
    corrupted row locks the account instead of failing the request.
    """
    try:
        return password_context.verify(password, password_hash)
    except ValueError:
        return False


class TokenService:
    """Issues and verifies HS256 JWTs that carry a user's identity."""

    def __init__(self, secret_key: str, expires_minutes: int = 60 * 24) -> None:
        self._secret_key = secret_key
        self.expires_minutes = expires_minutes

    def expiry(self, now: datetime | None = None) -> datetime:
        now = now or datetime.now(timezone.utc)
        return now + timedelta(minutes=self.expires_minutes)

    def issue(self, user_id: int, username: str) -> str:
        """Return a signed token for the user, valid for ``expires_minutes``."""

        now = datetime.now(timezone.utc)
        payload: Dict[str, Any] = {
            "sub": str(user_id),
            "user_id": user_id,
            "username": username,
            "iat": int(now.timestamp()),
            "exp": int(self.expiry(now).timestamp()),
        }
        return jwt.encode(payload, self._secret_key, algorithm=ALGORITHM)

    def verify(self, token: str) -> TokenData:
        """
        Decode a token and return the identity it carries.

        Only the signature and expiry are checked here; the caller must still
        confirm the user exists.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[ALGORITHM],
                options={"require": ["exp", "user_id", "username"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpired() from exc
        except jwt.InvalidSignatureError as exc:
            raise SignatureMismatch() from exc
        except jwt.PyJWTError as exc:
            raise MalformedToken() from exc

        try:
            return TokenData(**payload)
        except PydanticValidationError as exc:
            raise MalformedToken() from exc
