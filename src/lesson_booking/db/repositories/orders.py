"""
lesson_booking.db.repositories.orders

Repository for `Order` entities (the Order Store).

Responsibilities:
- Insert orders as submitted, starting in PENDING.
- Read an order back by id.
- Move `inventory_status` out of PENDING once inventory has been processed.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from lesson_booking.db.models import InventoryStatus, Order


class OrderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def insert(
        self,
        *,
        name: str,
        phone: str,
        address: str | None,
        items: list[dict[str, Any]],
    ) -> Order:
        order = Order(
            name=name,
            phone=phone,
            address=address,
            items=items,
            inventory_status=InventoryStatus.pending,
        )
        self._session.add(order)
        await self._session.flush()
        return order

    async def get(self, order_id: uuid.UUID) -> Order | None:
        return await self._session.get(Order, order_id, populate_existing=True)

    async def set_inventory_status(self, order_id: uuid.UUID, status: InventoryStatus) -> None:
        # Only a PENDING order may move; order content itself is never rewritten.
        stmt = (
            update(Order)
            .where(Order.id == order_id, Order.inventory_status == InventoryStatus.pending)
            .values(inventory_status=status)
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)


# --- Module Notes -----------------------------------------------------------
# Methods flush or execute only; the calling service decides when to commit.
