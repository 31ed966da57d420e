"""
lesson_booking.api.routers.lessons

Catalog endpoints used by the storefront.

Responsibilities:
- List lessons and search them (`GET /lessons`, `GET /search?q=`).
- Fetch one lesson (`GET /lessons/{id}`).
- Apply partial updates (`PUT /lessons/{id}`).
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from lesson_booking.api.deps import db_session
from lesson_booking.errors import NotFound
from lesson_booking.schemas import LessonOut
from lesson_booking.services.catalog_service import CatalogService

router = APIRouter(tags=["lessons"])


@router.get("/lessons", response_model=list[LessonOut])
async def list_lessons(session: AsyncSession = Depends(db_session)) -> list[LessonOut]:
    lessons = await CatalogService(session=session).list_all()
    return [LessonOut.model_validate(lesson) for lesson in lessons]


@router.get("/search", response_model=list[LessonOut])
async def search_lessons(
    q: str = "",
    session: AsyncSession = Depends(db_session),
) -> list[LessonOut]:
    lessons = await CatalogService(session=session).search(q)
    return [LessonOut.model_validate(lesson) for lesson in lessons]


@router.get("/lessons/{lesson_id}", response_model=LessonOut)
async def get_lesson(lesson_id: str, session: AsyncSession = Depends(db_session)) -> LessonOut:
    # lesson_id stays a str so malformed ids surface as InvalidIdentifier, not a schema error.
    lesson = await CatalogService(session=session).get(lesson_id)
    return LessonOut.model_validate(lesson)


@router.put("/lessons/{lesson_id}")
async def update_lesson(
    lesson_id: str,
    body: dict[str, Any] = Body(...),
    session: AsyncSession = Depends(db_session),
) -> dict[str, Any]:
    applied = await CatalogService(session=session).update_entry(lesson_id, body)
    if not applied:
        raise NotFound("Lesson", lesson_id)
    return {"id": lesson_id, "applied": True}
