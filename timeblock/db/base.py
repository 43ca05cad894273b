# timeblock/db/base.py

from __future__ import annotations

import contextlib
import logging
from typing import AsyncGenerator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from timeblock.config import settings

log = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


# --- Engine & session factory ---
if settings.DATABASE_URL.startswith("sqlite+aiosqlite://"):
    log.info("Using SQLite database (aiosqlite): %s", settings.DATABASE_URL)
    # NullPool: every session opens its own connection, so no connection
    # outlives the event loop that created it.
    engine = create_async_engine(
        settings.DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=NullPool,
        echo=False,
    )
elif settings.DATABASE_URL.startswith("postgresql+asyncpg://"):
    log.info("Using async PostgreSQL database")
    engine = create_async_engine(
        settings.DATABASE_URL, echo=(settings.ENVIRONMENT == "dev"), pool_pre_ping=True
    )
else:
    log.error("DATABASE_URL uses an unsupported driver: %.25s...", settings.DATABASE_URL)
    raise ValueError("DATABASE_URL must use the 'asyncpg' or 'aiosqlite' driver.")

async_session_factory = async_sessionmaker(
    bind=engine, class_=AsyncSession, expire_on_commit=False
)


async def get_async_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency: creates and yields an async session, handling commit/rollback.
    """
    session = async_session_factory()
    log.debug("get_async_db_session: session %s created", id(session))
    try:
        yield session
        await session.commit()
        log.debug("get_async_db_session: session %s committed", id(session))
    except SQLAlchemyError:
        log.exception("get_async_db_session: SQLAlchemyError in session %s, rolling back", id(session))
        await session.rollback()
        raise
    except Exception:
        log.debug("get_async_db_session: exception in session %s scope, rolling back", id(session))
        await session.rollback()
        raise
    finally:
        await session.close()


@contextlib.asynccontextmanager
async def async_session_context() -> AsyncGenerator[AsyncSession, None]:
    session: AsyncSession = async_session_factory()
    log.debug("Entering async session context %s", id(session))
    try:
        yield session
        await session.commit()
    except Exception:
        log.exception("Rolling back session %s from context due to exception", id(session))
        await session.rollback()
        raise
    finally:
        await session.close()


def _import_models() -> None:
    # Register every mapped class on Base.metadata.
    import timeblock.core.users.models  # noqa: F401
    import timeblock.core.chats.models  # noqa: F401


async def create_db_and_tables() -> None:
    _import_models()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    log.info("Database tables created")


async def drop_db_and_tables() -> None:
    _import_models()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    log.info("Database tables dropped")


__all__ = [
    "Base", "engine", "async_session_factory", "AsyncSession",
    "get_async_db_session", "async_session_context",
    "create_db_and_tables", "drop_db_and_tables",
]
