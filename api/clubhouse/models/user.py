"""User model.

A user is created on first sign-in with the identity provider and keyed by
email. Role is absent for plain users; booking approval promotes to member.
"""

import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from clubhouse.models.base import Base, TimestampMixin


class UserRole(enum.StrEnum):
    USER = "user"
    MEMBER = "member"
    ADMIN = "admin"


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(String(254), unique=True, nullable=False, index=True)
    name: Mapped[str | None] = mapped_column(String(200))
    photo_url: Mapped[str | None] = mapped_column(String(500))
    role: Mapped[UserRole | None] = mapped_column(
        Enum(UserRole, name="user_role", values_callable=lambda e: [x.value for x in e]),
    )
    membership_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    @property
    def effective_role(self) -> UserRole:
        return self.role or UserRole.USER

    def __repr__(self) -> str:
        return f"<User {self.email}>"
