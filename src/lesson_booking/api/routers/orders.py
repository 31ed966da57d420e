"""
lesson_booking.api.routers.orders

Order placement endpoint.

Responsibilities:
- Accept `POST /orders` bodies ({name, phone, address?, items[{lessonId, qty}]}).
- Delegate to OrderService with the configured inventory mode.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED

from lesson_booking.api.deps import db_session, settings_dep
from lesson_booking.schemas import OrderResult
from lesson_booking.services.order_service import OrderService
from lesson_booking.settings import Settings

router = APIRouter(tags=["orders"])


@router.post("/orders", response_model=OrderResult, status_code=HTTP_201_CREATED)
async def place_order(
    body: dict[str, Any] = Body(...),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> OrderResult:
    # The service validates the body itself so HTTP and direct callers share one error path.
    svc = OrderService(session=session, mode=settings.inventory_mode)
    return await svc.place_order(body)
