"""
lesson_booking.db.repositories

Repository package.

Responsibilities:
- Group data-access repositories for the persistence layer (Catalog Store, Order Store).
"""

# Package marker; repositories are imported directly from submodules.


# --- Module Notes -----------------------------------------------------------
# Repositories are intentionally thin; commit/rollback decisions belong in services.
