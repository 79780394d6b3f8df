"""Pydantic schemas for API serialisation."""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator

# Client-supplied identifiers never reach the database
IDENTIFIER_FIELDS = frozenset({"_id", "id"})


def strip_fields(payload: dict[str, Any], fields) -> dict[str, Any]:
    return {k: v for k, v in payload.items() if k not in fields}


def split_document(model: BaseModel, exclude_unset: bool = False) -> tuple[dict[str, Any], dict[str, Any]]:
    """Split a model with extra="allow" into (declared fields, extra fields)."""
    known = model.model_dump(include=set(type(model).model_fields), exclude_unset=exclude_unset)
    return known, dict(model.model_extra or {})


# --- Users ---


class UserCreate(BaseModel):
    email: EmailStr
    name: str | None = None
    photo_url: str | None = None


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str | None
    photo_url: str | None
    role: str | None
    membership_date: datetime | None
    created_at: datetime


class UserCreateResult(BaseModel):
    message: str
    inserted: bool
    id: int | None = None


class RoleOut(BaseModel):
    role: str


# --- Courts ---


class CourtCreate(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    court_type: str | None = None
    image: str | None = None
    price: float | None = None
    slots: list[Any] = []


class CourtUpdate(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str | None = None
    court_type: str | None = None
    image: str | None = None
    price: float | None = None
    slots: list[Any] | None = None

    @field_validator("name", "slots")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class CourtOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    court_type: str | None
    image: str | None
    price: float | None
    slots: list[Any]
    extra: dict[str, Any]
    created_at: datetime
    updated_at: datetime


class CourtPage(BaseModel):
    items: list[CourtOut]
    total: int


# --- Bookings ---


class BookingCreate(BaseModel):
    model_config = ConfigDict(extra="allow")

    court_id: int | None = None
    court_name: str | None = None
    court_type: str | None = None
    booking_date: date | None = None
    slots: list[Any] = []
    price: float | None = None


class BookingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_email: str
    court_id: int | None
    court_name: str | None
    court_type: str | None
    booking_date: date | None
    slots: list[Any]
    price: float | None
    status: str
    approved_at: datetime | None
    cancelled_at: datetime | None
    extra: dict[str, Any]
    created_at: datetime


class ApprovalResult(BaseModel):
    message: str
    booking_updated: bool
    user_updated: bool


# --- Announcements ---


class AnnouncementCreate(BaseModel):
    title: str
    content: str = ""


class AnnouncementUpdate(BaseModel):
    title: str | None = None
    content: str | None = None

    @field_validator("title", "content")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class AnnouncementOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    content: str
    created_at: datetime
    updated_at: datetime


# --- Admin ---


class BookingCounts(BaseModel):
    pending: int = 0
    approved: int = 0
    cancelled: int = 0


class StatsOut(BaseModel):
    users: int
    members: int
    admins: int
    courts: int
    announcements: int
    bookings: BookingCounts
