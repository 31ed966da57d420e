"""
lesson_booking.observability

Observability package.

Responsibilities:
- Structured logging configuration.
- Request context propagation and per-request access logging.
"""

# Package marker.
