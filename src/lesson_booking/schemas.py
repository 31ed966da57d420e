"""
lesson_booking.schemas

Typed request/result models shared by services and routers.

Responsibilities:
- Validate order requests and lesson updates (raising `InvalidRequest`).
- Parse catalog identifiers (raising `InvalidIdentifier`).
- Shape results returned to API clients (camelCase on the wire).
"""

from __future__ import annotations

import enum
import uuid
from collections.abc import Mapping
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel

from lesson_booking.errors import InvalidIdentifier, InvalidRequest


# Largest value an INTEGER column holds on every supported backend.
MAX_INT = 2**31 - 1


def parse_identifier(raw: Any) -> uuid.UUID:
    if isinstance(raw, uuid.UUID):
        return raw
    try:
        return uuid.UUID(str(raw))
    except ValueError as e:
        raise InvalidIdentifier(str(raw)) from e


def _validation_errors(e: ValidationError) -> list[dict[str, Any]]:
    return [
        {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
        for err in e.errors(include_url=False, include_context=False, include_input=False)
    ]


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Orders -----------------------------------------------------------------


class OrderItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Opaque here: a malformed id is reported per item, not rejected up front.
    catalog_entry_id: str = Field(
        validation_alias=AliasChoices("lessonId", "catalogEntryId", "catalog_entry_id"),
        serialization_alias="lessonId",
    )
    qty: int = Field(gt=0, le=MAX_INT, strict=True)


class OrderRequest(BaseModel):
    name: str
    phone: str
    address: str | None = None
    items: list[OrderItem] = Field(min_length=1)

    @field_validator("name", "phone")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    @classmethod
    def parse(cls, payload: Mapping[str, Any]) -> OrderRequest:
        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            raise InvalidRequest("Invalid order format", errors=_validation_errors(e)) from e


class ItemReason(enum.StrEnum):
    applied = "applied"
    not_found = "not_found"
    insufficient_spaces = "insufficient_spaces"
    invalid_identifier = "invalid_identifier"
    storage_error = "storage_error"


class ItemOutcome(_WireModel):
    catalog_entry_id: str
    qty: int
    applied: bool
    reason: ItemReason


class OrderResult(_WireModel):
    order_id: uuid.UUID
    inventory_status: str
    item_outcomes: list[ItemOutcome]


# --- Lessons ----------------------------------------------------------------


class LessonOut(_WireModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: uuid.UUID
    subject: str
    location: str
    price: float
    spaces: int
    image: str | None = None


class LessonUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    subject: str | None = Field(default=None, min_length=1)
    location: str | None = Field(default=None, min_length=1)
    price: float | None = Field(default=None, ge=0)
    spaces: int | None = Field(default=None, ge=0, le=MAX_INT, strict=True)
    image: str | None = None

    @classmethod
    def parse(cls, payload: Mapping[str, Any]) -> LessonUpdate:
        try:
            update = cls.model_validate(payload)
        except ValidationError as e:
            raise InvalidRequest("Invalid lesson update", errors=_validation_errors(e)) from e
        if not update.changes():
            raise InvalidRequest("Lesson update has no fields")
        return update

    def changes(self) -> dict[str, Any]:
        # Only fields the client actually sent; explicit nulls are kept for `image` only.
        fields = self.model_dump(exclude_unset=True)
        return {k: v for k, v in fields.items() if v is not None or k == "image"}


# --- Module Notes -----------------------------------------------------------
# Routers accept raw JSON bodies and call `.parse()` so validation errors share one
# taxonomy with service-level callers.
