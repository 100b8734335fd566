"""Service test fixtures — async DB, FastAPI test client, seeded accounts and draws.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB sessions
    - db_manager patched so readiness probes hit the test engine
    - Tokens are signed with the test JWT secret set in the root conftest

Design Decisions:
    - SQLite in-memory with StaticPool: one shared connection, so rows committed
      by fixtures are visible to request sessions
    - make_draw / add_participant insert rows directly, bypassing the API rules,
      so lock and visibility tests can start from any state
"""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool

import draws.infrastructure.database as db_module
from draws.db.base import Base
from draws.infrastructure.auth import create_access_token
from draws.infrastructure.database import DatabaseSessionManager, get_db
from draws.main import app
from draws.models.business import Business
from draws.models.draw import Draw
from draws.models.draw_participant import DrawParticipant
from draws.models.user import User


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


# ─── Accounts ────────────────────────────────────────────────────

async def _add(db: AsyncSession, obj):
    db.add(obj)
    await db.commit()
    await db.refresh(obj)
    return obj


@pytest.fixture
async def business(test_db):
    return await _add(test_db, Business(name="Chez Marco", email="hi@marco.test", city="Lyon"))


@pytest.fixture
async def other_business(test_db):
    return await _add(test_db, Business(name="Burger Town", city="Paris"))


@pytest.fixture
async def restaurant(test_db, business):
    return await _add(test_db, User(
        email="owner@marco.test", name="Marco", role="restaurant",
        business_id=business.id,
    ))


@pytest.fixture
async def other_restaurant(test_db, other_business):
    return await _add(test_db, User(
        email="owner@burger.test", name="Bob", role="restaurant",
        business_id=other_business.id,
    ))


@pytest.fixture
async def customer(test_db):
    return await _add(test_db, User(email="alice@example.test", name="Alice", role="user"))


@pytest.fixture
async def second_customer(test_db):
    return await _add(test_db, User(email="bruno@example.test", name="Bruno", role="user"))


@pytest.fixture
async def admin(test_db):
    return await _add(test_db, User(email="admin@example.test", name="Admin", role="admin"))


@pytest.fixture
def auth():
    """Build Authorization headers for a seeded user."""
    def _headers(user: User) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}
    return _headers


# ─── Draws ───────────────────────────────────────────────────────

def future(days: int = 7) -> datetime:
    return datetime.now(timezone.utc) + timedelta(days=days)


@pytest.fixture
def make_draw(test_db, business):
    """Insert a draw directly (no API rules)."""
    async def _make(**overrides) -> Draw:
        fields = {
            "business_id": business.id,
            "prize_name": "Free pizza night",
            "draw_type": "fixed_date",
            "draw_date": future(),
            "status": "active",
        }
        fields.update(overrides)
        return await _add(test_db, Draw(**fields))
    return _make


@pytest.fixture
def add_participant(test_db):
    """Insert a participation row directly."""
    async def _add_participant(draw: Draw, user: User) -> DrawParticipant:
        return await _add(test_db, DrawParticipant(draw_id=draw.id, user_id=user.id))
    return _add_participant
