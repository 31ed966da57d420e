"""
lesson_booking.api

API package for the lesson-booking backend.

Responsibilities:
- FastAPI app factory and router modules.
- API-layer dependency wiring and error rendering.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The API layer should remain thin: request parsing + delegation to services.
