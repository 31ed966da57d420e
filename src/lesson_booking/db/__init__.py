"""
lesson_booking.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide ORM models, engine/session setup, and repositories (Order Store, Catalog Store).
"""

# Package marker.
