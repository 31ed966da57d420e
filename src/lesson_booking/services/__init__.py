"""
lesson_booking.services

Service layer (transaction owners).

Responsibilities:
- Catalog queries and updates.
- Order placement with inventory deduction.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services own commit/rollback; repositories only flush and execute statements.
