"""Test config and shared fixtures."""
import os

# Keep test runs from writing log files; must be set before datarepo.config is imported
os.environ.setdefault("LOG_TO_FILE", "false")
os.environ.setdefault("APP_ENV", "testing")

import pytest
from typing import AsyncGenerator, Generator, List
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.ext.asyncio.session import AsyncSession

from apps.samples.models import Sample
from apps.samples.repository import AsyncSampleRepository, SampleRepository


# In-memory SQLite for tests
TEST_DATABASE_URL = "sqlite:///:memory:"
TEST_ASYNC_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def session() -> Generator[Session, None, None]:
    """Create blocking test database session."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )
    SQLModel.metadata.create_all(engine)

    session_maker = sessionmaker(engine, class_=Session, expire_on_commit=False)
    with session_maker() as session:
        yield session
        session.rollback()

    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
async def async_session() -> AsyncGenerator[AsyncSession, None]:
    """Create async test database session."""
    engine = create_async_engine(
        TEST_ASYNC_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    async_session_maker = sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def sample_repo(session: Session) -> SampleRepository:
    return SampleRepository(session)


@pytest.fixture
async def async_sample_repo(async_session: AsyncSession) -> AsyncSampleRepository:
    return AsyncSampleRepository(async_session)


@pytest.fixture
def five_samples(session: Session) -> List[Sample]:
    """Samples with ids 1..5, inserted out of order."""
    samples = [Sample(id=i, name=f"sample-{i}") for i in (4, 2, 5, 1, 3)]
    session.add_all(samples)
    session.commit()
    return samples


@pytest.fixture
async def async_five_samples(async_session: AsyncSession) -> List[Sample]:
    samples = [Sample(id=i, name=f"sample-{i}") for i in (4, 2, 5, 1, 3)]
    async_session.add_all(samples)
    await async_session.commit()
    return samples


@pytest.fixture
async def client(
    async_session: AsyncSession
) -> AsyncGenerator[AsyncClient, None]:
    """Create test client."""
    from main import app
    from apps.samples.api.router import get_db

    async def _get_db():
        yield async_session

    app.dependency_overrides[get_db] = _get_db

    from httpx import ASGITransport
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
