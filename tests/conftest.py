"""
tests.conftest

Shared fixtures: a per-test SQLite database, a seeded catalog, and an in-process API client.
"""

from __future__ import annotations

import json
import uuid
from collections.abc import AsyncIterator
from pathlib import Path

import httpx
import pytest
import pytest_asyncio
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from lesson_booking.api.app import create_app
from lesson_booking.db.init_db import init_db
from lesson_booking.db.models import Lesson, Order
from lesson_booking.db.repositories.lessons import LessonRepo
from lesson_booking.db.session import create_engine, create_sessionmaker
from lesson_booking.settings import Settings

CATALOG = [
    {"subject": "Math", "location": "Hendon", "price": 100.0, "spaces": 5},
    {"subject": "English", "location": "Colindale", "price": 80.0, "spaces": 5},
    {"subject": "Music", "location": "Brent Cross", "price": 90.5, "spaces": 12},
    {"subject": "Art", "location": "Golders Green", "price": 95.0, "spaces": 0, "image": "art.png"},
]


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        env="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'lessons.db'}",
        log_json=False,
    )


@pytest_asyncio.fixture
async def engine(settings: Settings) -> AsyncIterator[AsyncEngine]:
    engine = create_engine(settings)
    await init_db(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_sessionmaker(engine)


@pytest_asyncio.fixture
async def lesson_ids(session_factory: async_sessionmaker[AsyncSession]) -> dict[str, uuid.UUID]:
    async with session_factory() as session:
        repo = LessonRepo(session)
        ids = {}
        for row in CATALOG:
            lesson = await repo.create(**row)
            ids[row["subject"]] = lesson.id
        await session.commit()
    return ids


async def spaces_of(
    session_factory: async_sessionmaker[AsyncSession], lesson_id: uuid.UUID
) -> int:
    async with session_factory() as session:
        return await session.scalar(select(Lesson.spaces).where(Lesson.id == lesson_id))


async def order_count(session_factory: async_sessionmaker[AsyncSession]) -> int:
    async with session_factory() as session:
        return await session.scalar(select(func.count()).select_from(Order))


@pytest.fixture
def seed_file(tmp_path: Path) -> Path:
    path = tmp_path / "lessons.json"
    path.write_text(json.dumps(CATALOG), encoding="utf-8")
    return path


@pytest_asyncio.fixture
async def client(settings: Settings, seed_file: Path) -> AsyncIterator[httpx.AsyncClient]:
    app = create_app(settings=settings.model_copy(update={"seed_file": seed_file}))
    # httpx ASGITransport does not run lifespan events; enter the lifespan explicitly.
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
            yield c
