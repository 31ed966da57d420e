"""
lesson_booking.api.routers

HTTP routers (health, lessons, orders).
"""
