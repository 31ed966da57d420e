"""
lesson_booking.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide liveness check (`/healthz`).
- Provide readiness check (`/readyz`) with DB connectivity validation.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from lesson_booking.api.deps import db_session
from lesson_booking.errors import StorageUnavailable

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    # Liveness: process is up and serving HTTP.
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(session: AsyncSession = Depends(db_session)) -> dict[str, str]:
    # Readiness: verify the database is reachable.
    try:
        await session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        raise StorageUnavailable("readiness_check", context={"error": str(e)}) from e
    return {"status": "ready"}
