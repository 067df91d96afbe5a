"""Pytest configuration for all tests."""

import uuid
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from academia.domain.entities import GrantStatus, UserRole, UserStatus
from academia.infrastructure.auth.jwt_service import jwt_service
from academia.infrastructure.auth.password_hasher import hash_password
from academia.infrastructure.persistence import models  # noqa: F401
from academia.infrastructure.persistence.database import (
    Base,
    DatabaseManager,
    get_db_session,
    seed_default_roles,
    seed_permission_catalog,
    set_db_manager,
)
from academia.infrastructure.persistence.models import (
    DelegatedAccountModel,
    DelegatedSchoolAdminModel,
    SchoolModel,
    UserModel,
)

API = "/api/v1"
PASSWORD = "Password123!"


@pytest_asyncio.fixture
async def db_manager() -> AsyncGenerator[DatabaseManager, None]:
    """An in-memory database installed as the application's database.

    The session middleware and every route session use it.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    manager = DatabaseManager(engine=engine)
    previous = set_db_manager(manager)

    async with manager.session() as session:
        await seed_permission_catalog(session)
        await seed_default_roles(session)
        await session.commit()

    yield manager

    set_db_manager(previous)
    await manager.drop_tables()
    await manager.disconnect()


@pytest_asyncio.fixture
async def db_session(db_manager: DatabaseManager) -> AsyncGenerator[AsyncSession, None]:
    """Session for arranging and inspecting test data."""
    async with db_manager.session() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_manager: DatabaseManager) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client; each request gets its own database session."""
    from academia.infrastructure.api.app import app

    async def override_session() -> AsyncGenerator[AsyncSession, None]:
        async with db_manager.session() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_session

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides = {}


@pytest.fixture
def make_school(db_session: AsyncSession):
    """Factory creating committed schools."""

    async def _make(code: str | None = None, name: str = "Test School", **fields) -> SchoolModel:
        school = SchoolModel(
            id=str(uuid.uuid4()),
            name=name,
            code=code or f"SCH-{uuid.uuid4().hex[:6].upper()}",
            status=fields.pop("status", "active"),
            **fields,
        )
        db_session.add(school)
        await db_session.commit()
        return school

    return _make


@pytest.fixture
def make_user(db_session: AsyncSession):
    """Factory creating committed users with a known password."""

    async def _make(
        email: str | None = None,
        roles: list[str] | None = None,
        school_id: str | None = None,
        password: str | None = PASSWORD,
        status: str = UserStatus.ACTIVE.value,
        verified: bool = True,
    ) -> UserModel:
        user = UserModel(
            id=str(uuid.uuid4()),
            email=email or f"user-{uuid.uuid4().hex[:8]}@example.com",
            password_hash=hash_password(password) if password else None,
            first_name="Test",
            last_name="User",
            roles=roles or [UserRole.TEACHER.value],
            status=status,
            school_id=school_id,
            is_email_verified=verified,
        )
        db_session.add(user)
        await db_session.commit()
        return user

    return _make


@pytest.fixture
def make_delegated_account(db_session: AsyncSession):
    """Factory creating committed delegated accounts for a user."""

    async def _make(
        user: UserModel,
        permissions: list[str],
        status: str = GrantStatus.ACTIVE.value,
        start_date: datetime | None = None,
        expiry_date: datetime | None = None,
    ) -> DelegatedAccountModel:
        account = DelegatedAccountModel(
            id=str(uuid.uuid4()),
            user_id=user.id,
            email=user.email,
            permissions=permissions,
            status=status,
            start_date=start_date,
            expiry_date=expiry_date,
        )
        db_session.add(account)
        await db_session.commit()
        return account

    return _make


@pytest.fixture
def make_school_grant(db_session: AsyncSession):
    """Factory creating committed delegated school admin grants."""

    async def _make(
        user: UserModel,
        school_id: str,
        permissions: list[str],
        status: str = GrantStatus.ACTIVE.value,
        start_date: datetime | None = None,
        expiry_date: datetime | None = None,
    ) -> DelegatedSchoolAdminModel:
        grant = DelegatedSchoolAdminModel(
            id=str(uuid.uuid4()),
            user_id=user.id,
            school_id=school_id,
            email=user.email,
            permissions=permissions,
            status=status,
            start_date=start_date,
            expiry_date=expiry_date,
        )
        db_session.add(grant)
        await db_session.commit()
        return grant

    return _make


def auth_cookies(user: UserModel, expires_delta: timedelta | None = None) -> dict[str, str]:
    """Cookie header carrying a freshly minted access token for ``user``."""
    token = jwt_service.create_access_token(
        user_id=user.id,
        email=user.email,
        roles=list(user.roles),
        school_id=user.school_id,
        expires_delta=expires_delta,
    )
    return {"Cookie": f"accessToken={token}"}


def set_cookie_values(response) -> dict[str, str]:
    """Parse the Set-Cookie headers of a response into name -> value."""
    values = {}
    for header in response.headers.get_list("set-cookie"):
        name, _, rest = header.partition("=")
        values[name.strip()] = rest.split(";", 1)[0].strip('"')
    return values


def past(**kwargs) -> datetime:
    return datetime.now(timezone.utc) - timedelta(**kwargs)


def future(**kwargs) -> datetime:
    return datetime.now(timezone.utc) + timedelta(**kwargs)
