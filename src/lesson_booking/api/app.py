"""
lesson_booking.api.app

FastAPI app factory for the lesson-booking backend.

Responsibilities:
- Build the FastAPI application and register routers/middleware/error handlers.
- Initialize and dispose shared infrastructure (DB engine/session factory).
- Provide a single composition root where cross-cutting concerns live.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.staticfiles import StaticFiles

from lesson_booking import __version__
from lesson_booking.api.errors import register_exception_handlers
from lesson_booking.api.routers.health import router as health_router
from lesson_booking.api.routers.lessons import router as lessons_router
from lesson_booking.api.routers.orders import router as orders_router
from lesson_booking.db.init_db import init_db, seed_lessons
from lesson_booking.db.session import create_engine, create_sessionmaker, verify_connection
from lesson_booking.errors import StorageUnavailable
from lesson_booking.observability.logging import configure_logging, get_logger
from lesson_booking.observability.middleware import RequestContextMiddleware
from lesson_booking.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    # Configure structured logging once at process startup (before app serves requests).
    configure_logging(
        service_name=settings.service_name,
        level=settings.log_level,
        json_logs=settings.log_json,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env, inventory_mode=settings.inventory_mode.value)
        # One engine per process; routers obtain sessions via `lesson_booking.api.deps`.
        engine = create_engine(settings)
        try:
            await verify_connection(engine)
        except StorageUnavailable:
            log.error("startup_failed", reason="database unreachable")
            await engine.dispose()
            raise

        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            # Dev/test convenience: create tables (and optionally seed) automatically.
            await init_db(engine)
            if settings.seed_file is not None:
                await seed_lessons(app.state.sessionmaker, settings.seed_file)
        try:
            yield
        finally:
            # Dispose the engine to close pools/FDs gracefully.
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Lesson Booking API",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestContextMiddleware)
    register_exception_handlers(app)

    app.include_router(health_router, tags=["health"])
    app.include_router(lessons_router)
    app.include_router(orders_router)

    if settings.images_dir is not None:
        if settings.images_dir.is_dir():
            app.mount("/images", StaticFiles(directory=settings.images_dir), name="images")
        else:
            log.warning("images_dir_missing", images_dir=str(settings.images_dir))

    return app


# --- Module Notes -----------------------------------------------------------
# This file stays small: app composition lives here; business logic stays in services.
