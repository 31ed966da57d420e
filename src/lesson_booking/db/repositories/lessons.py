"""
lesson_booking.db.repositories.lessons

Repository for `Lesson` entities (the Catalog Store).

Responsibilities:
- Read the catalog (all, by id, by predicate).
- Apply inventory decrements as single UPDATE statements.
- Apply partial field updates.
"""

from __future__ import annotations

import enum
import uuid
from collections.abc import Callable
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from lesson_booking.db.models import Lesson


class DecrementResult(enum.StrEnum):
    applied = "applied"
    not_found = "not_found"
    insufficient_spaces = "insufficient_spaces"


class LessonRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        subject: str,
        location: str,
        price: float,
        spaces: int,
        image: str | None = None,
    ) -> Lesson:
        lesson = Lesson(subject=subject, location=location, price=price, spaces=spaces, image=image)
        self._session.add(lesson)
        await self._session.flush()
        return lesson

    async def count(self) -> int:
        return int(await self._session.scalar(select(func.count()).select_from(Lesson)) or 0)

    async def find_by_id(self, lesson_id: uuid.UUID) -> Lesson | None:
        # populate_existing: rows may have been changed by bulk UPDATEs in this session.
        return await self._session.get(Lesson, lesson_id, populate_existing=True)

    async def find_all(self) -> list[Lesson]:
        stmt = (
            select(Lesson)
            .order_by(Lesson.subject, Lesson.id)
            .execution_options(populate_existing=True)
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def find_matching(self, predicate: Callable[[Lesson], bool]) -> list[Lesson]:
        # Filtering in Python keeps number rendering identical across database backends.
        return [lesson for lesson in await self.find_all() if predicate(lesson)]

    async def decrement_spaces(
        self, lesson_id: uuid.UUID, qty: int, *, guarded: bool
    ) -> DecrementResult:
        """
        Subtract `qty` from `spaces` in one statement.

        guarded=False reproduces the unconditional decrement (spaces may go negative).
        guarded=True adds `spaces >= qty` to the WHERE clause, so check and write are atomic.
        """

        stmt = update(Lesson).where(Lesson.id == lesson_id).values(spaces=Lesson.spaces - qty)
        if guarded:
            stmt = stmt.where(Lesson.spaces >= qty)
        result = await self._session.execute(
            stmt.execution_options(synchronize_session=False)
        )
        if result.rowcount:
            return DecrementResult.applied
        if not guarded:
            return DecrementResult.not_found

        # Zero rows: tell a missing lesson apart from a failed capacity check.
        exists = await self._session.scalar(select(Lesson.id).where(Lesson.id == lesson_id))
        return DecrementResult.insufficient_spaces if exists else DecrementResult.not_found

    async def update(self, lesson_id: uuid.UUID, fields: dict[str, Any]) -> int:
        # Returns the matched row count (0 or 1).
        stmt = (
            update(Lesson)
            .where(Lesson.id == lesson_id)
            .values(**fields)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return int(result.rowcount or 0)


# --- Module Notes -----------------------------------------------------------
# Decrements never read-then-write; concurrent orders race only inside the database.
