"""
lesson_booking.db.init_db

DB initialization helpers (dev/test convenience).

Responsibilities:
- Create tables for local development and tests.
- Seed the catalog from a JSON file when it is empty.
"""

from __future__ import annotations

import json
from pathlib import Path

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from lesson_booking.db import models  # noqa: F401  # ensure models are registered on Base.metadata
from lesson_booking.db.base import Base
from lesson_booking.db.repositories.lessons import LessonRepo
from lesson_booking.errors import ConfigurationError
from lesson_booking.observability.logging import get_logger

log = get_logger(__name__)


async def init_db(engine: AsyncEngine) -> None:
    """
    Dev/test bootstrap: create tables if they don't exist.
    """

    # Use a transactional DDL block when supported by the backend.
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def seed_lessons(
    session_factory: async_sessionmaker[AsyncSession], seed_file: Path
) -> int:
    """
    Insert the lessons listed in `seed_file` (a JSON array) if the catalog is empty.
    Returns the number of lessons inserted.
    """

    try:
        rows = json.loads(seed_file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ConfigurationError(
            f"Cannot load seed file {seed_file}", context={"error": str(e)}
        ) from e
    if not isinstance(rows, list):
        raise ConfigurationError(f"Seed file {seed_file} must contain a JSON array")

    async with session_factory() as session:
        lessons = LessonRepo(session)
        if await lessons.count() > 0:
            return 0
        for row in rows:
            await lessons.create(
                subject=row["subject"],
                location=row["location"],
                price=row["price"],
                spaces=row["spaces"],
                image=row.get("image"),
            )
        await session.commit()

    log.info("catalog_seeded", count=len(rows), seed_file=str(seed_file))
    return len(rows)
