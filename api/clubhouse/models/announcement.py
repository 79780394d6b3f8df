"""Club announcements shown to every visitor."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from clubhouse.models.base import Base, TimestampMixin


class Announcement(TimestampMixin, Base):
    __tablename__ = "announcements"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")

    def __repr__(self) -> str:
        return f"<Announcement {self.title}>"
