"""
lesson_booking.services.order_service

Order placement service (transaction + persistence owner).

Responsibilities:
- Validate an order request before any write.
- Persist the order and apply per-item inventory decrements in request order.
- Report a structured per-item outcome, even when some items could not be applied.

Inventory modes (`Settings.inventory_mode`):
- legacy: the order is committed first, then each item is decremented unconditionally
  and committed on its own. Spaces can go negative; this is the historical contract.
- guarded: same two-phase flow, but each decrement is `spaces - qty WHERE spaces >= qty`.
  Items that fail the check are reported and the order is marked PARTIAL.
- transactional: the order insert and every guarded decrement share one transaction.
  Any item that cannot be applied rolls everything back and raises OrderRejected.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from lesson_booking.db.models import InventoryStatus, Order
from lesson_booking.db.repositories.lessons import DecrementResult, LessonRepo
from lesson_booking.db.repositories.orders import OrderRepo
from lesson_booking.errors import InvalidIdentifier, OrderRejected, StorageUnavailable
from lesson_booking.observability.logging import get_logger
from lesson_booking.schemas import (
    ItemOutcome,
    ItemReason,
    OrderItem,
    OrderRequest,
    OrderResult,
    parse_identifier,
)
from lesson_booking.settings import InventoryMode

log = get_logger(__name__)

_REASONS = {
    DecrementResult.applied: ItemReason.applied,
    DecrementResult.not_found: ItemReason.not_found,
    DecrementResult.insufficient_spaces: ItemReason.insufficient_spaces,
}


class OrderService:
    def __init__(
        self,
        *,
        session: AsyncSession,
        mode: InventoryMode = InventoryMode.legacy,
    ) -> None:
        self._session = session
        self._mode = mode

        self._orders = OrderRepo(session)
        self._lessons = LessonRepo(session)

    async def place_order(self, request: OrderRequest | Mapping[str, Any]) -> OrderResult:
        order_request = (
            request if isinstance(request, OrderRequest) else OrderRequest.parse(request)
        )
        if self._mode is InventoryMode.transactional:
            return await self._place_in_transaction(order_request)
        return await self._place_then_apply(order_request)

    async def _place_then_apply(self, request: OrderRequest) -> OrderResult:
        order_id = (await self._record_order(request)).id
        guarded = self._mode is InventoryMode.guarded

        outcomes: list[ItemOutcome] = []
        for item in request.items:
            outcome = await self._apply_item_independently(order_id, item, guarded=guarded)
            outcomes.append(outcome)

        status = (
            InventoryStatus.applied
            if all(o.applied for o in outcomes)
            else InventoryStatus.partial
        )
        await self._finish_order(order_id, status)
        return OrderResult(
            order_id=order_id,
            inventory_status=status.value,
            item_outcomes=outcomes,
        )

    async def _record_order(self, request: OrderRequest) -> Order:
        try:
            order = await self._orders.insert(
                name=request.name,
                phone=request.phone,
                address=request.address,
                items=_order_items(request),
            )
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            log.error("order_storage_unavailable", operation="insert_order", error=str(e))
            raise StorageUnavailable("insert_order", context={"error": str(e)}) from e

        log.info(
            "order_recorded",
            order_id=str(order.id),
            items=len(request.items),
            mode=self._mode.value,
        )
        return order

    async def _apply_item_independently(
        self, order_id: uuid.UUID, item: OrderItem, *, guarded: bool
    ) -> ItemOutcome:
        # Each item commits alone; a failure here never undoes the order or earlier items.
        # Callers pass ids, not ORM rows: a rollback expires loaded instances.
        try:
            lesson_id = parse_identifier(item.catalog_entry_id)
        except InvalidIdentifier:
            return self._outcome(order_id, item, ItemReason.invalid_identifier)

        try:
            result = await self._lessons.decrement_spaces(lesson_id, item.qty, guarded=guarded)
            await self._session.commit()
        except (SQLAlchemyError, OverflowError) as e:
            await self._session.rollback()
            log.error(
                "inventory_item_failed",
                order_id=str(order_id),
                lesson_id=item.catalog_entry_id,
                qty=item.qty,
                error=str(e),
            )
            return _item_outcome(item, ItemReason.storage_error)

        return self._outcome(order_id, item, _REASONS[result])

    async def _finish_order(self, order_id: uuid.UUID, status: InventoryStatus) -> None:
        # Best effort: the order is already durable, so a failed status write is only logged.
        try:
            await self._orders.set_inventory_status(order_id, status)
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            log.error(
                "order_status_update_failed",
                order_id=str(order_id),
                status=status.value,
                error=str(e),
            )
            return
        if status is InventoryStatus.partial:
            log.warning("order_inventory_partial", order_id=str(order_id))

    async def _place_in_transaction(self, request: OrderRequest) -> OrderResult:
        outcomes: list[ItemOutcome] = []
        try:
            order = await self._orders.insert(
                name=request.name,
                phone=request.phone,
                address=request.address,
                items=_order_items(request),
            )
            for item in request.items:
                try:
                    lesson_id = parse_identifier(item.catalog_entry_id)
                except InvalidIdentifier:
                    outcomes.append(_item_outcome(item, ItemReason.invalid_identifier))
                    continue
                result = await self._lessons.decrement_spaces(lesson_id, item.qty, guarded=True)
                outcomes.append(_item_outcome(item, _REASONS[result]))

            if not all(o.applied for o in outcomes):
                await self._session.rollback()
                rejected = [o.model_dump(by_alias=True, mode="json") for o in outcomes]
                log.warning("order_rejected", items=len(outcomes), outcomes=rejected)
                raise OrderRejected(rejected)

            await self._orders.set_inventory_status(order.id, InventoryStatus.applied)
            await self._session.commit()
        except (SQLAlchemyError, OverflowError) as e:
            await self._session.rollback()
            log.error("order_storage_unavailable", operation="place_order", error=str(e))
            raise StorageUnavailable("place_order", context={"error": str(e)}) from e

        log.info(
            "order_recorded",
            order_id=str(order.id),
            items=len(outcomes),
            mode=self._mode.value,
        )
        return OrderResult(
            order_id=order.id,
            inventory_status=InventoryStatus.applied.value,
            item_outcomes=outcomes,
        )

    def _outcome(self, order_id: uuid.UUID, item: OrderItem, reason: ItemReason) -> ItemOutcome:
        if reason is ItemReason.applied:
            log.info(
                "inventory_item_applied",
                order_id=str(order_id),
                lesson_id=item.catalog_entry_id,
                qty=item.qty,
            )
        else:
            log.info(
                "inventory_item_skipped",
                order_id=str(order_id),
                lesson_id=item.catalog_entry_id,
                qty=item.qty,
                reason=reason.value,
            )
        return _item_outcome(item, reason)


def _item_outcome(item: OrderItem, reason: ItemReason) -> ItemOutcome:
    return ItemOutcome(
        catalog_entry_id=item.catalog_entry_id,
        qty=item.qty,
        applied=reason is ItemReason.applied,
        reason=reason,
    )


def _order_items(request: OrderRequest) -> list[dict[str, Any]]:
    # Stored exactly as requested (duplicates included) under the storefront's key names.
    return [item.model_dump(by_alias=True) for item in request.items]


# --- Module Notes -----------------------------------------------------------
# Duplicate lesson ids in one order are applied once per occurrence, in order.
# No locks are taken here; guarded modes rely on the single-statement conditional UPDATE.
