"""Integration test fixtures for database and HTTP client operations.

Each test gets a fresh in-memory SQLite database with the full schema.
Uses polyfactory for type-safe test data generation.
"""

from collections.abc import AsyncGenerator
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from src.vitelis import models  # noqa: F401
from src.vitelis.api.dependencies import get_db_session
from src.vitelis.api.dependencies.services import get_engine_notifier, get_object_storage
from src.vitelis.core.storage import ObjectStorage
from src.vitelis.main import create_app
from src.vitelis.models import Company, ReportCompany, User
from tests.factories import (
    DEFAULT_TEST_PASSWORD,
    CompanyFactory,
    GenerationStepFactory,
    ReportFactory,
    UserFactory,
)
from tests.helpers import auth_headers


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine]:
    """Create a test database engine with every table created."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(test_engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection: Any, _record: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    """Provide an async session for arranging and inspecting data.

    The session does NOT auto-commit. Tests must call `await session.commit()`
    so the API sees their rows.
    """
    async with session_factory() as session:
        yield session


@pytest.fixture
def s3_client() -> MagicMock:
    """Stand-in for the boto3 S3 client."""
    client = MagicMock()
    client.get_object.return_value = {
        "Body": MagicMock(read=MagicMock(return_value=b"company: Initech\n")),
        "ContentType": "application/x-yaml",
    }
    return client


@pytest.fixture
def engine_notifier() -> AsyncMock:
    notifier = AsyncMock()
    notifier.notify = AsyncMock(return_value=None)
    return notifier


@pytest.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    s3_client: MagicMock,
    engine_notifier: AsyncMock,
) -> AsyncGenerator[AsyncClient]:
    """HTTP client bound to the test database, storage and engine notifier."""
    app = create_app()

    async def _get_test_session() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = _get_test_session
    app.dependency_overrides[get_object_storage] = lambda: ObjectStorage(s3_client, "test-bucket")
    app.dependency_overrides[get_engine_notifier] = lambda: engine_notifier

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


@pytest.fixture
async def test_user(db_session: AsyncSession) -> User:
    """A metered account with 5 credits."""
    user = UserFactory.build(credits=5)
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def test_admin(db_session: AsyncSession) -> User:
    user = UserFactory.admin()
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
def user_headers(test_user: User) -> dict[str, str]:
    return auth_headers(test_user)


@pytest.fixture
def admin_headers(test_admin: User) -> dict[str, str]:
    return auth_headers(test_admin)


@pytest.fixture
def user_credentials(test_user: User) -> dict[str, str]:
    return {"email": test_user.email, "password": DEFAULT_TEST_PASSWORD}


@pytest.fixture
async def deep_dive(db_session: AsyncSession) -> dict[str, Any]:
    """A report with two companies (Alpha, Beta) and two catalog steps."""
    report = ReportFactory.build()
    alpha = CompanyFactory.build(name="Alpha")
    beta = CompanyFactory.build(name="Beta")
    first = GenerationStepFactory.build(name="collect_sources")
    second = GenerationStepFactory.build(name="write_summary", dependency="collect_sources")
    db_session.add_all([report, alpha, beta, first, second])
    await db_session.flush()

    companies: list[Company] = [alpha, beta]
    db_session.add_all(
        [ReportCompany(report_id=report.id, company_id=company.id) for company in companies]
    )
    await db_session.commit()

    return {
        "report_id": report.id,
        "company_ids": [alpha.id, beta.id],
        "step_ids": [first.id, second.id],
    }
