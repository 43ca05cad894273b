# timeblock/core/auth/security.py

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from timeblock.config import settings
from timeblock.core.errors import AuthenticationFailure
from timeblock.core.users.models import User
from timeblock.db.base import get_async_db_session

from .schemas import TokenData

log = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/v1/auth/login/test")


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """
    Creates a signed JWT access token.

    Args:
        data (dict): Claims to include. The 'user_id' key becomes 'sub'.
        expires_delta (timedelta | None, optional): Token lifetime.
            Defaults to settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES.

    Returns:
        str: Encoded JWT.
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode["exp"] = expire
    if "user_id" in to_encode:
        to_encode["sub"] = str(to_encode.pop("user_id"))
    elif "sub" not in to_encode:
        raise ValueError("Missing 'user_id' or 'sub' in data for JWT")

    encoded_jwt = jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    log.debug("Created JWT token for sub: %s", to_encode["sub"])
    return encoded_jwt


def decode_token(token: str) -> TokenData:
    """
    Verifies a JWT and returns its claims.

    Raises:
        AuthenticationFailure: if the token is malformed, expired or has no 'sub'.
    """
    try:
        payload: dict[str, Any] = jwt.decode(
            token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM]
        )
        user_id: str | None = payload.get("sub")
        if user_id is None:
            log.warning("Token verification failed: 'sub' (user_id) claim missing.")
            raise AuthenticationFailure("Authentication failed")
        return TokenData(user_id=user_id)
    except JWTError as e:
        log.warning("Token verification failed: JWTError - %s", e)
        raise AuthenticationFailure("Authentication failed") from e
    except ValidationError as e:
        log.warning("Token verification failed: ValidationError - %s", e)
        raise AuthenticationFailure("Authentication failed") from e


def bearer_token(authorization: str | None) -> str:
    """Extracts the token from an ``Authorization: Bearer <token>`` header value."""
    if not authorization:
        raise AuthenticationFailure("No authorization header")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationFailure("Authentication failed")
    return token.strip()


class TokenVerifier:
    """Resolves an identity token to a stored user."""

    def __init__(self, db_session: AsyncSession) -> None:
        self.db = db_session

    async def verify(self, token: str | None) -> User:
        if not token:
            raise AuthenticationFailure("No authorization header")
        token_data = decode_token(token)
        user = await self.db.get(User, token_data.user_id)
        if user is None:
            log.warning("User with id %s from valid token not found in DB.", token_data.user_id)
            raise AuthenticationFailure("Authentication failed")
        log.debug("Authenticated user retrieved: %r", user)
        return user


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_async_db_session),
) -> User:
    """
    FastAPI dependency returning the authenticated user.

    Raises:
        HTTPException: 401 if the token does not resolve to a stored user.
    """
    try:
        return await TokenVerifier(db).verify(token)
    except AuthenticationFailure as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e
