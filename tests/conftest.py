import os

# Keep the application engine off PostgreSQL while tests import the app
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from werkzeug.security import generate_password_hash

from courtqueue.api.deps import get_scheduler, get_snapshot_builder
from courtqueue.core.database import get_db, init_db
from courtqueue.main import app
from courtqueue.models.court import Court
from courtqueue.models.player import Player
from courtqueue.models.scheduled_lock import ScheduledLock
from courtqueue.services.court_store import CourtStore
from courtqueue.services.occupancy import OccupancyScheduler
from courtqueue.services.snapshot import SnapshotBuilder

T0 = datetime(2026, 5, 1, 18, 0, 0, tzinfo=timezone.utc)

# Cheap hash so tests don't spend their time in scrypt
TEST_HASH_METHOD = "pbkdf2:sha256:1000"


class FakeClock:
    """Manually advanced clock injected wherever the services ask for "now"."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: int = 0, minutes: int = 0):
        self.now = self.now + timedelta(seconds=seconds, minutes=minutes)


@pytest.fixture
def clock():
    return FakeClock(T0)


@pytest.fixture
async def engine(tmp_path):
    """A fresh on-disk SQLite database per test."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'courts.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def store(db):
    return CourtStore(db)


@pytest.fixture
def scheduler(clock):
    return OccupancyScheduler(
        capacity=4, session_seconds=900, merge_min_remaining_seconds=600, clock=clock
    )


@pytest.fixture
def builder(clock):
    return SnapshotBuilder(capacity=4, session_seconds=900, group_window_seconds=1.0, clock=clock)


@pytest.fixture
def make_court(store):
    async def _make(name: str = "Court 1") -> Court:
        court = Court(name=name, is_locked=False)
        store.add(court)
        await store.commit()
        return court

    return _make


@pytest.fixture
def make_players(store):
    async def _make(*usernames: str):
        players = [
            Player(
                username=username,
                password_hash=generate_password_hash(f"{username}-pw", method=TEST_HASH_METHOD),
                first_name=username.title(),
                last_name="Test",
            )
            for username in usernames
        ]
        for player in players:
            store.add(player)
        await store.commit()
        return players

    return _make


@pytest.fixture
def make_lock(store):
    async def _make(court: Court, starts_at: datetime, ends_at: datetime, reason: str = "Maintenance"):
        lock = ScheduledLock(court_id=court.id, starts_at=starts_at, ends_at=ends_at, reason=reason)
        store.add(lock)
        await store.commit()
        return lock

    return _make


@pytest.fixture
async def client(session_factory, scheduler, builder):
    """HTTP client against the app with test session, scheduler and clock."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_scheduler] = lambda: scheduler
    app.dependency_overrides[get_snapshot_builder] = lambda: builder

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
