"""Run the booking API with uvicorn: `python -m lesson_booking.api` or `lesson-booking`."""

from __future__ import annotations

import uvicorn

from lesson_booking.api.app import create_app
from lesson_booking.settings import get_settings


def main() -> None:
    settings = get_settings()

    # RequestContextMiddleware already writes one `request` event per call.
    uvicorn.run(
        create_app(settings=settings),
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,
        access_log=False,
    )


if __name__ == "__main__":
    main()
