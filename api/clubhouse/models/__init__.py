"""All models imported here so Base.metadata knows every table."""

from clubhouse.models.announcement import Announcement
from clubhouse.models.base import Base
from clubhouse.models.booking import Booking, BookingStatus
from clubhouse.models.court import Court
from clubhouse.models.user import User, UserRole

__all__ = [
    "Base",
    "User",
    "UserRole",
    "Court",
    "Booking",
    "BookingStatus",
    "Announcement",
]
