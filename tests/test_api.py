"""
tests.test_api

HTTP surface: status codes, wire shapes and app wiring (CORS, static images, lifecycle).
"""

from __future__ import annotations

import uuid

import httpx
import pytest
from sqlalchemy import text

from lesson_booking.api.app import create_app
from lesson_booking.errors import StorageUnavailable
from lesson_booking.settings import InventoryMode


async def _lesson(client: httpx.AsyncClient, subject: str) -> dict:
    r = await client.get("/lessons")
    return next(lesson for lesson in r.json() if lesson["subject"] == subject)


@pytest.mark.asyncio
async def test_list_lessons_from_seed(client: httpx.AsyncClient) -> None:
    r = await client.get("/lessons")

    assert r.status_code == 200
    body = r.json()
    assert {lesson["subject"] for lesson in body} == {"Math", "English", "Music", "Art"}
    assert set(body[0]) == {"id", "subject", "location", "price", "spaces", "image"}


@pytest.mark.asyncio
async def test_search(client: httpx.AsyncClient) -> None:
    r = await client.get("/search", params={"q": "MATH"})
    assert r.status_code == 200
    assert [lesson["subject"] for lesson in r.json()] == ["Math"]

    everything = await client.get("/search")
    assert len(everything.json()) == 4


@pytest.mark.asyncio
async def test_place_order(client: httpx.AsyncClient) -> None:
    math = await _lesson(client, "Math")

    r = await client.post(
        "/orders",
        json={"name": "Ada", "phone": "0700", "items": [{"lessonId": math["id"], "qty": 3}]},
    )

    assert r.status_code == 201
    body = r.json()
    uuid.UUID(body["orderId"])
    assert body["inventoryStatus"] == "APPLIED"
    assert body["itemOutcomes"] == [
        {"catalogEntryId": math["id"], "qty": 3, "applied": True, "reason": "applied"}
    ]
    assert (await _lesson(client, "Math"))["spaces"] == 2


@pytest.mark.asyncio
async def test_place_order_with_unknown_lesson_still_succeeds(client: httpx.AsyncClient) -> None:
    r = await client.post(
        "/orders",
        json={"name": "Ada", "phone": "0700", "items": [{"lessonId": str(uuid.uuid4()), "qty": 1}]},
    )

    assert r.status_code == 201
    assert r.json()["itemOutcomes"][0]["reason"] == "not_found"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"name": "", "phone": "0700", "items": [{"lessonId": "x", "qty": 1}]},
        {"name": "Ada", "phone": "0700", "items": []},
        {"name": "Ada", "phone": "0700", "items": "nope"},
        {"name": "Ada", "phone": "0700", "items": [{"lessonId": "x", "qty": 10**20}]},
    ],
)
async def test_place_order_invalid(client: httpx.AsyncClient, payload: dict) -> None:
    r = await client.post("/orders", json=payload)

    assert r.status_code == 400
    assert r.json()["error"] == "invalid_request"
    assert r.json()["details"]["errors"]


@pytest.mark.asyncio
async def test_place_order_rejects_non_object_body(client: httpx.AsyncClient) -> None:
    r = await client.post("/orders", json=[1, 2, 3])

    assert r.status_code == 400
    assert r.json()["error"] == "invalid_request"


@pytest.mark.asyncio
async def test_update_lesson(client: httpx.AsyncClient) -> None:
    music = await _lesson(client, "Music")

    r = await client.put(f"/lessons/{music['id']}", json={"spaces": 20})

    assert r.status_code == 200
    assert r.json() == {"id": music["id"], "applied": True}
    got = await client.get(f"/lessons/{music['id']}")
    assert got.json()["spaces"] == 20


@pytest.mark.asyncio
async def test_update_lesson_errors(client: httpx.AsyncClient) -> None:
    r = await client.put("/lessons/not-a-uuid", json={"spaces": 1})
    assert r.status_code == 400
    assert r.json()["error"] == "invalid_identifier"

    r = await client.put(f"/lessons/{uuid.uuid4()}", json={"spaces": 1})
    assert r.status_code == 404
    assert r.json()["error"] == "not_found"

    music = await _lesson(client, "Music")
    r = await client.put(f"/lessons/{music['id']}", json={"teacher": "Bach"})
    assert r.status_code == 400
    assert r.json()["error"] == "invalid_request"


@pytest.mark.asyncio
async def test_get_unknown_lesson(client: httpx.AsyncClient) -> None:
    r = await client.get(f"/lessons/{uuid.uuid4()}")
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_transactional_mode_answers_409(settings, seed_file) -> None:
    app = create_app(
        settings=settings.model_copy(
            update={"seed_file": seed_file, "inventory_mode": InventoryMode.transactional}
        )
    )
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            art = await _lesson(client, "Art")
            r = await client.post(
                "/orders",
                json={"name": "Ada", "phone": "0700", "items": [{"lessonId": art["id"], "qty": 1}]},
            )

    assert r.status_code == 409
    body = r.json()
    assert body["error"] == "order_rejected"
    assert body["details"]["itemOutcomes"][0]["reason"] == "insufficient_spaces"


@pytest.mark.asyncio
async def test_storage_failure_answers_500(settings, seed_file) -> None:
    app = create_app(settings=settings.model_copy(update={"seed_file": seed_file}))
    async with app.router.lifespan_context(app):
        async with app.state.engine.begin() as conn:
            await conn.execute(text("DROP TABLE orders"))
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            math = await _lesson(client, "Math")
            r = await client.post(
                "/orders",
                json={"name": "Ada", "phone": "0700", "items": [{"lessonId": math["id"], "qty": 1}]},
            )

    assert r.status_code == 500
    body = r.json()
    assert body["error"] == "storage_unavailable"
    assert "orders" not in body["message"]


@pytest.mark.asyncio
async def test_request_id_is_echoed(client: httpx.AsyncClient) -> None:
    r = await client.get("/healthz", headers={"x-request-id": "abc-123"})
    assert r.headers["x-request-id"] == "abc-123"

    r = await client.get("/healthz")
    assert r.headers["x-request-id"]


@pytest.mark.asyncio
async def test_cors_headers(client: httpx.AsyncClient) -> None:
    r = await client.get("/lessons", headers={"Origin": "http://storefront.example"})
    assert r.headers["access-control-allow-origin"] == "*"


@pytest.mark.asyncio
async def test_static_images(settings, tmp_path) -> None:
    images = tmp_path / "images"
    images.mkdir()
    (images / "art.png").write_bytes(b"\x89PNG fake")
    app = create_app(settings=settings.model_copy(update={"images_dir": images}))

    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            ok = await client.get("/images/art.png")
            missing = await client.get("/images/nope.png")

    assert ok.status_code == 200
    assert ok.content == b"\x89PNG fake"
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_startup_fails_fast_when_database_unreachable(settings, tmp_path) -> None:
    bad = settings.model_copy(
        update={"database_url": f"sqlite+aiosqlite:///{tmp_path / 'no' / 'such' / 'dir.db'}"}
    )
    app = create_app(settings=bad)

    with pytest.raises(StorageUnavailable):
        async with app.router.lifespan_context(app):
            pass
