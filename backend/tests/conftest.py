from datetime import datetime, timedelta
from pathlib import Path
from typing import AsyncIterator, Iterator

import pytest
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from fitledger.api.deps import get_clock
from fitledger.core.config import settings
from fitledger.core.database import get_db, init_db
from fitledger.main import create_app
from fitledger.services.ledger import ActivityService, RecordStore, UserLockRegistry


class FakeClock:
    """Controllable replacement for datetime.now."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 3, 15, 18, 30))


@pytest.fixture
async def session_maker(tmp_path: Path) -> AsyncIterator[async_sessionmaker]:
    # Fresh SQLite file per test for isolation
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await init_db(bind=engine)
    try:
        yield async_sessionmaker(engine, expire_on_commit=False)
    finally:
        await engine.dispose()


@pytest.fixture
async def db(session_maker: async_sessionmaker) -> AsyncIterator[AsyncSession]:
    async with session_maker() as session:
        yield session


@pytest.fixture
def store(db: AsyncSession, clock: FakeClock) -> RecordStore:
    return RecordStore(db, clock=clock)


@pytest.fixture
def service(store: RecordStore) -> ActivityService:
    return ActivityService(store, UserLockRegistry())


@pytest.fixture
async def user(store: RecordStore):
    user = await store.create_user(
        username="alex",
        email="alex@example.com",
        first_name="Alex",
        last_name="Rivera",
        current_weight=180.0,
        target_weight=170.0,
    )
    await store.commit()
    return user


@pytest.fixture
def test_app(session_maker: async_sessionmaker, clock: FakeClock) -> Iterator[FastAPI]:
    async def _override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app = create_app()
    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_clock] = lambda: clock

    try:
        yield app
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
async def client(test_app: FastAPI) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def register(client: AsyncClient, username: str = "sam", **extra) -> dict:
    payload = {
        "username": username,
        "email": f"{username}@example.com",
        "firstName": username.title(),
        "lastName": "Tester",
        **extra,
    }
    resp = await client.post("/api/users", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


def auth(user: dict) -> dict:
    return {settings.AUTH_USER_HEADER: user["id"]}


WORKOUT = {
    "name": "Morning run",
    "type": "Cardio",
    "duration": 30,
    "exercises": "5k easy",
}
