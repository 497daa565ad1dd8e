import os
import uuid
from contextlib import contextmanager
from typing import AsyncGenerator, Optional

# Point settings at an in-memory database before anything reads them.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from libs.auth.models import AuthUser, Role  # noqa: E402
from libs.auth.tokens import create_access_token  # noqa: E402
from libs.db.base import Base  # noqa: E402
from services.gateway_service.app.main import app  # noqa: E402

# Import all models so metadata includes every table
from services.accounts_service import models as _account_models  # noqa: F401,E402
from services.communications_service import models as _comms_models  # noqa: F401,E402
from services.payments_service import models as _payment_models  # noqa: F401,E402
from services.sessions_service import models as _session_models  # noqa: F401,E402


@pytest_asyncio.fixture
async def test_engine():
    """
    A fresh in-memory SQLite database per test.

    StaticPool keeps the single connection alive so every session sees the
    same database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session) -> AsyncGenerator[AsyncClient, None]:
    """
    Yield an AsyncClient against the gateway app with the DB dependency
    pointed at the test session.
    """
    from libs.db.session import get_async_db

    app.dependency_overrides[get_async_db] = lambda: db_session

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Auth helpers
# ---------------------------------------------------------------------------


def make_auth_user(account=None, *, role: Optional[Role] = None) -> AuthUser:
    """Caller identity for an account, or for a random user."""
    if account is None:
        return AuthUser(user_id=uuid.uuid4(), role=role or Role.USER)
    return AuthUser(user_id=account.id, email=account.email, role=role or account.role)


def auth_headers_for(account, role: Optional[Role] = None) -> dict:
    """Real bearer headers for an account, signed with the configured secret."""
    token = create_access_token(
        subject=str(account.id),
        email=account.email,
        role=(role or account.role).value,
    )
    return {"Authorization": f"Bearer {token}"}


@contextmanager
def override_auth(target_app, user: AuthUser):
    """Temporarily replace the bearer dependency with a fixed caller."""
    from libs.auth.dependencies import get_current_user

    target_app.dependency_overrides[get_current_user] = lambda: user
    try:
        yield
    finally:
        target_app.dependency_overrides.pop(get_current_user, None)
