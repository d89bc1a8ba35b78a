"""
Pytest configuration and fixtures for Stream CMS tests
"""

import os
import sys
import tempfile
from collections.abc import AsyncGenerator
from datetime import timedelta

import pytest

# Settings are read at import time, so the environment must be ready first
TEST_DIR = tempfile.mkdtemp(prefix="streamcms-test-")
os.environ.setdefault("DATABASE_URL", f"sqlite+aiosqlite:///{TEST_DIR}/app.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ["POSTER_UPLOAD_DIR"] = os.path.join(TEST_DIR, "posters")

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))  # noqa: PTH100, PTH118, PTH120

from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.future import select  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

from streamcms.auth import create_access_token, hash_password  # noqa: E402
from streamcms.config import settings  # noqa: E402
from streamcms.database import Base  # noqa: E402
from streamcms.models import Category, Movie, Role, User  # noqa: E402
from streamcms.tracking import MemoryStore, ViewEventBus  # noqa: E402

# Every test gets a fresh SQLite file; override with TEST_DATABASE_URL to run against PostgreSQL
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", f"sqlite+aiosqlite:///{TEST_DIR}/test.db")

test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)

TestSessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

# Now import and patch the app's database components
import streamcms.database as database_module  # noqa: E402
from main import app  # noqa: E402

database_module.engine = test_engine
database_module.AsyncSessionLocal = TestSessionLocal


@pytest.fixture(scope="function")
async def setup_test_database():
    """Create a fresh schema with the default roles for each test that needs it."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        session.add_all(
            [
                Role(name="user", permissions=[]),
                Role(name="admin", permissions=["*"]),
                Role(name="superadmin", permissions=["*"]),
            ]
        )
        await session.commit()

    yield

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(scope="function")
async def test_db(setup_test_database) -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionLocal() as session:
        yield session


@pytest.fixture
async def client(setup_test_database) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the app through ASGI, no network involved."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


async def _create_user(db: AsyncSession, email: str, password: str, role_name: str, name: str) -> User:
    result = await db.execute(select(Role).where(Role.name == role_name))
    role = result.scalars().first()

    user = User(name=name, email=email, hashed_password=hash_password(password), role_id=role.id)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest.fixture
async def test_user(test_db: AsyncSession) -> User:
    """A signed-up viewer with the 'user' role."""
    return await _create_user(test_db, "viewer@example.com", "viewerpassword", "user", "Viewer")


@pytest.fixture
async def test_admin(test_db: AsyncSession) -> User:
    return await _create_user(test_db, "admin@example.com", "adminpassword", "admin", "Admin")


def _token_for(user: User) -> str:
    return create_access_token(data={"sub": user.email}, expires_delta=timedelta(minutes=30))


@pytest.fixture
def auth_headers(test_user: User) -> dict:
    return {"Authorization": f"Bearer {_token_for(test_user)}"}


@pytest.fixture
def admin_auth_headers(test_admin: User) -> dict:
    return {"Authorization": f"Bearer {_token_for(test_admin)}"}


@pytest.fixture
def admin_cookie_headers(test_admin: User) -> dict:
    """Session cookie as set by the login form."""
    return {"Cookie": f"{settings.session_cookie_name}={_token_for(test_admin)}"}


@pytest.fixture
async def test_category(test_db: AsyncSession) -> Category:
    category = Category(name="Science Fiction", slug="science-fiction", description="Futures and other worlds")
    test_db.add(category)
    await test_db.commit()
    await test_db.refresh(category)
    return category


@pytest.fixture
async def published_movie(test_db: AsyncSession, test_category: Category) -> Movie:
    movie = Movie(
        title="Quantum Paradox",
        slug="quantum-paradox",
        synopsis="A physicist loops through the same afternoon.",
        release_year=2024,
        duration=118,
        video_url="https://cdn.example.com/quantum-paradox.m3u8",
        is_published=True,
        view_count=15420,
        categories=[test_category],
    )
    test_db.add(movie)
    await test_db.commit()
    await test_db.refresh(movie)
    return movie


@pytest.fixture
async def draft_movie(test_db: AsyncSession) -> Movie:
    movie = Movie(
        title="Director's Cut",
        slug="directors-cut",
        video_url="https://cdn.example.com/directors-cut.m3u8",
        is_published=False,
        view_count=7,
    )
    test_db.add(movie)
    await test_db.commit()
    await test_db.refresh(movie)
    return movie


async def get_view_count(slug: str) -> int:
    """Read the stored count through a fresh session."""
    async with TestSessionLocal() as session:
        result = await session.execute(select(Movie.view_count).where(Movie.slug == slug))
        return result.scalar_one()


@pytest.fixture
def view_bus() -> ViewEventBus:
    return ViewEventBus()


@pytest.fixture
def session_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def local_store() -> MemoryStore:
    return MemoryStore()
