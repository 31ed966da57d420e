"""
lesson_booking.services.catalog_service

Catalog query and update service.

Responsibilities:
- List and search lessons.
- Fetch a single lesson by identifier.
- Apply partial lesson updates.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from lesson_booking.db.models import Lesson
from lesson_booking.db.repositories.lessons import LessonRepo
from lesson_booking.errors import NotFound, StorageUnavailable
from lesson_booking.observability.logging import get_logger
from lesson_booking.schemas import LessonUpdate, parse_identifier

log = get_logger(__name__)


def render_number(value: float | int) -> str:
    # Integral floats render without ".0" so "100" finds a lesson priced 100.0.
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def lesson_matches(lesson: Lesson, query: str) -> bool:
    """
    Case-insensitive substring match on subject, location, price or spaces.
    The empty query matches every lesson.
    """

    needle = query.lower()
    haystacks = (
        lesson.subject,
        lesson.location,
        render_number(lesson.price),
        render_number(lesson.spaces),
    )
    return any(needle in h.lower() for h in haystacks)


class CatalogService:
    def __init__(self, *, session: AsyncSession) -> None:
        self._session = session
        self._lessons = LessonRepo(session)

    async def list_all(self) -> list[Lesson]:
        try:
            return await self._lessons.find_all()
        except SQLAlchemyError as e:
            raise StorageUnavailable("list_lessons", context={"error": str(e)}) from e

    async def search(self, query_text: str) -> list[Lesson]:
        try:
            return await self._lessons.find_matching(
                lambda lesson: lesson_matches(lesson, query_text)
            )
        except SQLAlchemyError as e:
            raise StorageUnavailable("search_lessons", context={"error": str(e)}) from e

    async def get(self, lesson_id: Any) -> Lesson:
        parsed = parse_identifier(lesson_id)
        try:
            lesson = await self._lessons.find_by_id(parsed)
        except SQLAlchemyError as e:
            raise StorageUnavailable("get_lesson", context={"error": str(e)}) from e
        if lesson is None:
            raise NotFound("Lesson", str(parsed))
        return lesson

    async def update_entry(
        self, lesson_id: Any, fields: LessonUpdate | Mapping[str, Any]
    ) -> bool:
        """
        Apply a partial update. Returns False when no lesson has this id.
        A malformed id raises InvalidIdentifier before the body is looked at.
        """

        parsed: uuid.UUID = parse_identifier(lesson_id)
        update = fields if isinstance(fields, LessonUpdate) else LessonUpdate.parse(fields)
        changes = update.changes()

        try:
            matched = await self._lessons.update(parsed, changes)
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            raise StorageUnavailable(
                "update_lesson", context={"lesson_id": str(parsed), "error": str(e)}
            ) from e

        log.info(
            "lesson_updated", lesson_id=str(parsed), fields=sorted(changes), applied=bool(matched)
        )
        return matched > 0
