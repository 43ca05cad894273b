import os
import sys
import tempfile

import pytest
import pytest_asyncio

# Ensure Python path includes project root for `import timeblock`
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

# Test environment: file-backed SQLite (fresh tables per test), stub providers.
_DB_DIR = tempfile.mkdtemp(prefix="timeblock-tests-")
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_DIR}/test.db"
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ["LLM_PROVIDER"] = "stub"
os.environ["CALENDAR_PROVIDER"] = "noop"
os.environ["DEFAULT_TIMEZONE"] = "UTC"

from timeblock.core.auth.security import create_access_token  # noqa: E402
from timeblock.core.chats.models import Chat  # noqa: E402
from timeblock.core.users.models import User  # noqa: E402
from timeblock.db.base import (  # noqa: E402
    async_session_context,
    create_db_and_tables,
    drop_db_and_tables,
)


@pytest_asyncio.fixture
async def setup_db():
    await create_db_and_tables()
    yield
    await drop_db_and_tables()


@pytest_asyncio.fixture
async def db_session(setup_db):
    async with async_session_context() as session:
        yield session


@pytest_asyncio.fixture
async def user(setup_db) -> User:
    async with async_session_context() as session:
        u = User(id="u1", name="Test User")
        session.add(u)
    return u


@pytest_asyncio.fixture
async def chat(user) -> Chat:
    async with async_session_context() as session:
        c = Chat(user_id=user.id, title="Planning")
        session.add(c)
    return c


@pytest.fixture
def token(user) -> str:
    return create_access_token(data={"user_id": user.id})


@pytest.fixture
def auth_headers(token) -> dict:
    return {"Authorization": f"Bearer {token}"}
