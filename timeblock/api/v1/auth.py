# timeblock/api/v1/auth.py

from __future__ import annotations

import logging

from fastapi import APIRouter, Body, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from timeblock.core.auth.schemas import TestLoginRequest, Token
from timeblock.core.auth.security import create_access_token
from timeblock.core.users.service import UsersService
from timeblock.db.base import get_async_db_session

router = APIRouter(prefix="/v1/auth", tags=["Authentication & Testing"])
log = logging.getLogger(__name__)


@router.post(
    "/login/test",
    response_model=Token,
    summary="[Development only] Issue a bearer token for a user id",
    description=(
        "Ensures a user row for `user_id` exists and returns a signed token for it. "
        "There is no password check: keep this route out of production deployments."
    ),
)
async def test_login(
    login_data: TestLoginRequest = Body(...),
    db: AsyncSession = Depends(get_async_db_session),
) -> Token:
    log.warning("[API /auth/login/test] issuing token for '%s' without credentials", login_data.user_id)
    try:
        user = await UsersService(db).get_or_create_user(
            login_data.user_id, name=login_data.name, email=login_data.email
        )
    except SQLAlchemyError as e:
        log.exception("[API /auth/login/test] could not ensure user '%s'", login_data.user_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not create user",
        ) from e
    return Token(access_token=create_access_token(data={"user_id": user.id}), token_type="bearer")
