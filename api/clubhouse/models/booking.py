"""Booking model.

A booking references its owner by email, not by foreign key, and copies the
court details it was made against.
"""

import enum
from datetime import date, datetime

from sqlalchemy import Date, DateTime, Enum, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from clubhouse.models.base import Base, JSONType, TimestampMixin


class BookingStatus(enum.StrEnum):
    PENDING = "pending"
    APPROVED = "approved"
    CANCELLED = "cancelled"


class Booking(TimestampMixin, Base):
    __tablename__ = "bookings"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_email: Mapped[str] = mapped_column(String(254), nullable=False)

    # What was booked
    court_id: Mapped[int | None] = mapped_column()
    court_name: Mapped[str | None] = mapped_column(String(200))
    court_type: Mapped[str | None] = mapped_column(String(100))
    booking_date: Mapped[date | None] = mapped_column(Date)
    slots: Mapped[list] = mapped_column(JSONType, default=list)
    price: Mapped[float | None] = mapped_column(Numeric(10, 2, asdecimal=False))

    # Status
    status: Mapped[BookingStatus] = mapped_column(
        Enum(BookingStatus, name="booking_status", values_callable=lambda e: [x.value for x in e]),
        default=BookingStatus.PENDING,
        nullable=False,
    )
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    cancelled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    extra: Mapped[dict] = mapped_column(JSONType, default=dict)

    __table_args__ = (
        # My bookings by status
        Index("ix_bookings_user_status", "user_email", "status"),
        # Admin queue
        Index("ix_bookings_status", "status"),
    )

    def __repr__(self) -> str:
        return f"<Booking {self.id} {self.user_email} {self.status}>"
