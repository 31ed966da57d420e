"""
lesson_booking.db.models

Persistence schema for the storefront.

Responsibilities:
- Define ORM models:
  - Lesson: catalog entry with remaining capacity ("spaces")
  - Order: durable record of a customer's purchase request
"""

from __future__ import annotations

import enum
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, CheckConstraint, Enum, Float, String, Text, Uuid as SAUuid
from sqlalchemy.orm import Mapped, mapped_column

from lesson_booking.db.base import Base


def _utcnow() -> datetime:
    # Persist naive UTC timestamps for simplicity (SQLite has no tz-aware type).
    return datetime.now(timezone.utc).replace(tzinfo=None)


class InventoryStatus(enum.StrEnum):
    # Values are returned to API clients; treat as stable API contract.
    pending = "PENDING"
    applied = "APPLIED"
    partial = "PARTIAL"


class Lesson(Base):
    __tablename__ = "lessons"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    subject: Mapped[str] = mapped_column(String(256), nullable=False, index=True)
    location: Mapped[str] = mapped_column(String(256), nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    # No floor constraint: legacy inventory mode may drive this below zero.
    spaces: Mapped[int] = mapped_column(nullable=False, default=0)
    image: Mapped[str | None] = mapped_column(String(512), nullable=True)

    __table_args__ = (CheckConstraint("price >= 0", name="price_non_negative"),)


class Order(Base):
    __tablename__ = "orders"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    phone: Mapped[str] = mapped_column(String(64), nullable=False)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Items keep the raw catalog ids as sent; they are weak references, not foreign keys.
    items: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)

    inventory_status: Mapped[InventoryStatus] = mapped_column(
        Enum(InventoryStatus), nullable=False, default=InventoryStatus.pending, index=True
    )

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, index=True)


# --- Module Notes -----------------------------------------------------------
# Orders are append-only apart from `inventory_status`, which moves once from PENDING.
