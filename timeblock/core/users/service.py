# timeblock/core/users/service.py

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from timeblock.core.users.models import User

log = logging.getLogger(__name__)


class UsersService:
    """
    Async service for users. Works with internal user ids.
    """
    model = User

    def __init__(self, db_session: AsyncSession):
        self.db: AsyncSession = db_session

    async def get_user(self, user_id: str) -> User | None:
        return await self.db.get(User, user_id)

    async def get_or_create_user(
        self, user_id: str, name: str | None = None, email: str | None = None
    ) -> User:
        """
        Finds a user by internal id or creates a new one.

        Args:
            user_id (str): Internal user identifier.
            name (str | None, optional): Display name. Defaults to None.
            email (str | None, optional): Email address. Defaults to None.

        Returns:
            User: The found or created ORM object.
        """
        log.debug("Ensuring user by internal id=%s", user_id)
        user = await self.db.get(User, user_id)
        if not user:
            log.info("User with internal id=%s not found, creating.", user_id)
            user = User(id=user_id, name=name, email=email)
            self.db.add(user)
            await self.db.flush()
            await self.db.refresh(user)
            log.info("Created new user: %r", user)
        elif name and user.name != name:
            log.debug("Updating name for existing user %s", user.id)
            user.name = name
            await self.db.flush()
        return user
