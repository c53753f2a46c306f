"""Shared test fixtures for async database, sessions, the school hierarchy, and auth tokens."""

import uuid
from collections.abc import AsyncGenerator
from dataclasses import dataclass

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from fundraiser_api.core.config import Settings
from fundraiser_api.core.database import enable_sqlite_foreign_keys
from fundraiser_api.core.security import create_access_token, hash_password
from fundraiser_api.models import Base, District, School, State, Teacher, User


@pytest.fixture
def settings() -> Settings:
    """Test application settings."""
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        jwt_secret_key="test-secret-key-not-for-production",
        jwt_algorithm="HS256",
        jwt_access_token_expire_minutes=30,
    )


@pytest.fixture
async def async_engine(settings: Settings) -> AsyncGenerator[AsyncEngine]:
    """Create an in-memory async SQLite engine with foreign keys enforced."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    enable_sqlite_foreign_keys(engine.sync_engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def async_session(async_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Create a per-test async session."""
    session_factory = async_sessionmaker(async_engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@dataclass
class Hierarchy:
    """Two states, one district and school in each, and one teacher per school."""

    utah: State
    nevada: State
    washington: District
    clark: District
    snow_canyon: School
    desert_hills: School
    holmberg: Teacher
    reyes: Teacher


@pytest.fixture
async def hierarchy(async_session: AsyncSession) -> Hierarchy:
    """Utah > Washington County > Snow Canyon and Nevada > Clark County > Desert Hills."""
    utah = State(name="Utah", abbr="UT")
    nevada = State(name="Nevada", abbr="NV")
    async_session.add_all([utah, nevada])
    await async_session.flush()

    washington = District(name="Washington County", state_id=utah.id)
    clark = District(name="Clark County", state_id=nevada.id)
    async_session.add_all([washington, clark])
    await async_session.flush()

    snow_canyon = School(name="Snow Canyon", district_id=washington.id)
    desert_hills = School(name="Desert Hills", district_id=clark.id)
    async_session.add_all([snow_canyon, desert_hills])
    await async_session.flush()

    holmberg = Teacher(first_name="Mark", last_name="Holmberg", school_id=snow_canyon.id)
    reyes = Teacher(first_name="Ana", last_name="Reyes", school_id=desert_hills.id)
    async_session.add_all([holmberg, reyes])
    await async_session.commit()

    return Hierarchy(
        utah=utah,
        nevada=nevada,
        washington=washington,
        clark=clark,
        snow_canyon=snow_canyon,
        desert_hills=desert_hills,
        holmberg=holmberg,
        reyes=reyes,
    )


@pytest.fixture
async def sample_user(async_session: AsyncSession) -> User:
    """Create a sample admin user in the test database."""
    user = User(
        id=uuid.uuid4(),
        username="testadmin",
        email="admin@test.com",
        hashed_password=hash_password("testpassword123"),
        role="admin",
    )
    async_session.add(user)
    await async_session.commit()
    await async_session.refresh(user)
    return user


@pytest.fixture
def admin_token(settings: Settings) -> str:
    """Generate a JWT access token for an admin user."""
    return create_access_token(
        subject="testadmin",
        role="admin",
        secret_key=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )


@pytest.fixture
def editor_token(settings: Settings) -> str:
    """Generate a JWT access token for an editor user."""
    return create_access_token(
        subject="testeditor",
        role="editor",
        secret_key=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )
