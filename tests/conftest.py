"""Pytest configuration and shared fixtures."""

import asyncio
import os
from dataclasses import replace

TEST_TOKEN = "test-token"

# Must be set before anything imports studygate.config
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SURVEY_TOKEN"] = TEST_TOKEN

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402

from studygate.adapters.persistence.database import Base  # noqa: E402
from studygate.application.ports.group_count_repo import GroupCountRepository  # noqa: E402
from studygate.application.ports.participant_repo import ParticipantRepository  # noqa: E402
from studygate.domain.errors import TransientStoreError  # noqa: E402
from studygate.domain.value_objects.enums import ParticipantStatus  # noqa: E402


# ─── In-memory fakes ────────────────────────────────────────────────


class FakeParticipantRepo(ParticipantRepository):
    """Dict-backed registry; every call yields to the loop to allow interleaving."""

    def __init__(self):
        self.records = {}
        self.calls: list[str] = []

    async def get(self, participant_id):
        self.calls.append("get")
        await asyncio.sleep(0)
        record = self.records.get(participant_id)
        return replace(record) if record else None

    async def create(self, record):
        self.calls.append("create")
        await asyncio.sleep(0)
        if record.id in self.records:
            return False
        self.records[record.id] = replace(record)
        return True

    async def mark_used(self, participant_id, used_at):
        self.calls.append("mark_used")
        await asyncio.sleep(0)
        record = self.records.get(participant_id)
        if record is None or record.is_used():
            return False
        record.status = ParticipantStatus.USED
        record.used_at = used_at
        return True

    async def count_used_by_group(self):
        used = {}
        for record in self.records.values():
            if record.is_used():
                used[record.group] = used.get(record.group, 0) + 1
        return used


class FakeCountRepo(GroupCountRepository):
    """Compare-and-set counter that yields between read and write."""

    def __init__(self):
        self.counts = {}
        self.conflicts = 0

    async def get_count(self, group):
        return self.counts.get(group, 0)

    async def get_all(self):
        return dict(self.counts)

    async def increment(self, group):
        while True:
            observed = self.counts.get(group, 0)
            await asyncio.sleep(0)
            if self.counts.get(group, 0) == observed:
                self.counts[group] = observed + 1
                return observed + 1
            self.conflicts += 1


class FailingCountRepo(FakeCountRepo):
    async def increment(self, group):
        raise TransientStoreError("store unavailable")


@pytest.fixture
def participant_repo():
    return FakeParticipantRepo()


@pytest.fixture
def count_repo():
    return FakeCountRepo()


@pytest.fixture
def failing_count_repo():
    return FailingCountRepo()


# ─── SQLite-backed fixtures ─────────────────────────────────────────


@pytest_asyncio.fixture
async def sql_sessions(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'studygate.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
def asgi_app(sql_sessions):
    from studygate.infrastructure.api.dependencies import get_session_factory
    from studygate.main import app

    app.dependency_overrides[get_session_factory] = lambda: sql_sessions
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def api_client(asgi_app):
    transport = httpx.ASGITransport(app=asgi_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
