"""
Duet Backend — Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_db_session: Mock database session (no real DB needed)
    ├── db_session:      AsyncSession on a private in-memory SQLite database
    ├── seed:            Row factories bound to db_session
    ├── test_client:     HTTPX AsyncClient for the app (default database)
    └── api_client:      HTTPX AsyncClient whose requests share db_session
"""

import os

# Override settings for testing BEFORE any app imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["DAILY_TOPIC_ID"] = "1"
os.environ["DAILY_SUBTOPIC_ID"] = "1"
os.environ["DAILY_ROTATION_EPOCH"] = "2025-10-01"

from datetime import datetime, timezone  # noqa: E402
from typing import Optional  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.core.dates import to_utc_date  # noqa: E402
import app.models  # noqa: E402,F401
from app.database import Base, get_db_session  # noqa: E402
from app.models import (  # noqa: E402
    Category,
    DailyAppOpen,
    JournalEntry,
    Question,
    Relationship,
    SubTopic,
    Topic,
    User,
    UserAnswer,
)


# ══════════════════════════════════════════════════════════════════════════
# Mocked session
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get_user(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = user
            result = await user_service.get(mock_db_session, 1)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    session.add_all = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# SQLite-backed session
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_session():
    """
    An AsyncSession on a fresh in-memory SQLite database with every table.

    StaticPool keeps the single connection alive, so all statements in the
    test see the same database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session
    await engine.dispose()


class Seeder:
    """Inserts rows with sensible defaults; every method flushes and returns the row."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self._counter = 0

    async def _add(self, obj):
        self.session.add(obj)
        await self.session.flush()
        await self.session.refresh(obj)
        return obj

    def _next(self) -> int:
        self._counter += 1
        return self._counter

    async def user(self, **values) -> User:
        n = self._next()
        values.setdefault("uuid", f"device-{n}")
        values.setdefault("name", f"User {n}")
        return await self._add(User(**values))

    async def relationship(self, user1: User, user2: User, **values) -> Relationship:
        return await self._add(Relationship(user1_id=user1.id, user2_id=user2.id, **values))

    async def topic(self, name: str = "Icebreakers", **values) -> Topic:
        return await self._add(Topic(name=name, **values))

    async def category(self, name: str = "This or That", **values) -> Category:
        return await self._add(Category(name=name, **values))

    async def sub_topic(
        self,
        name: str = "Daily Life",
        topic: Optional[Topic] = None,
        category: Optional[Category] = None,
        **values,
    ) -> SubTopic:
        return await self._add(
            SubTopic(
                name=name,
                topic_id=topic.id if topic else None,
                category_id=category.id if category else None,
                **values,
            )
        )

    async def questions(self, sub_topic: SubTopic, count: int, **values) -> list:
        rows = []
        for i in range(count):
            rows.append(
                await self._add(
                    Question(
                        sub_topic_id=sub_topic.id,
                        question_text=f"{sub_topic.name} question {i + 1}",
                        sort_order=i,
                        **values,
                    )
                )
            )
        return rows

    async def answer(self, user: User, question: Question, text: Optional[str] = "yes", **values) -> UserAnswer:
        return await self._add(
            UserAnswer(user_id=user.id, question_id=question.id, answer_text=text, **values)
        )

    async def journal(self, relationship: Relationship, entry_type: str = "memory", **values) -> JournalEntry:
        values.setdefault("date_time", datetime(2025, 10, 1, 12, tzinfo=timezone.utc))
        return await self._add(
            JournalEntry(relationship_id=relationship.id, type=entry_type, **values)
        )

    async def app_open(self, user: User, opened_at: datetime) -> DailyAppOpen:
        return await self._add(
            DailyAppOpen(user_id=user.id, opened_at=opened_at, opened_on=to_utc_date(opened_at))
        )


@pytest_asyncio.fixture
async def seed(db_session):
    return Seeder(db_session)


# ══════════════════════════════════════════════════════════════════════════
# HTTP clients
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client():
    """
    HTTPX AsyncClient wired straight to the ASGI app (no server).

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from app.main import app
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def api_client(db_session):
    """Like test_client, but every request uses the test's SQLite session."""
    from app.main import app

    async def override_session():
        yield db_session
        await db_session.flush()

    app.dependency_overrides[get_db_session] = override_session
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.pop(get_db_session, None)
