"""Booking routes: request, review queue, approval, cancellation.

Lifecycle: pending -> approved (admin), pending -> cancelled, pending -> deleted
(admin reject). Approved and cancelled bookings are final.
"""

import logging
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from clubhouse.core.database import get_db
from clubhouse.core.dependencies import get_identity, is_admin, require_admin, require_member
from clubhouse.core.identity import Identity
from clubhouse.models.booking import Booking, BookingStatus
from clubhouse.models.user import User, UserRole
from clubhouse.schemas import IDENTIFIER_FIELDS, ApprovalResult, BookingCreate, BookingOut, split_document, strip_fields

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["bookings"])

# Fields the server owns on a booking
SERVER_FIELDS = IDENTIFIER_FIELDS | {"status", "user_email", "approved_at", "cancelled_at"}


async def _get_booking_or_404(db: AsyncSession, booking_id: int) -> Booking:
    booking = await db.get(Booking, booking_id)
    if booking is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")
    return booking


def _require_pending(booking: Booking) -> None:
    if booking.status != BookingStatus.PENDING:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Booking is already {booking.status.value}",
        )


async def _list_bookings(db: AsyncSession, booking_status: BookingStatus, email: str | None = None):
    query = select(Booking).where(Booking.status == booking_status)
    if email is not None:
        query = query.where(Booking.user_email == email)
    result = await db.execute(query.order_by(Booking.created_at.desc(), Booking.id.desc()))
    return result.scalars().all()


@router.post("", response_model=BookingOut, status_code=status.HTTP_201_CREATED)
async def create_booking(
    payload: dict[str, Any] = Body(...),
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    """Request a booking. Whatever status the client sends, it starts out pending."""
    try:
        body = BookingCreate.model_validate(strip_fields(payload, SERVER_FIELDS))
    except ValidationError as exc:
        raise RequestValidationError(exc.errors()) from None

    fields, extra = split_document(body)
    booking = Booking(**fields, extra=extra, user_email=identity.email, status=BookingStatus.PENDING)
    db.add(booking)
    await db.flush()
    logger.info("Booking %s requested by %s", booking.id, identity.email)
    return booking


# ---------------------------------------------------------------------------
# Listings
# ---------------------------------------------------------------------------


@router.get("/pending", response_model=list[BookingOut])
async def list_pending_bookings(
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await _list_bookings(db, BookingStatus.PENDING)


@router.get("/pending/{email}", response_model=list[BookingOut])
async def list_my_pending_bookings(
    email: str,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    if identity.email != email and not await is_admin(identity, db):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden access")
    return await _list_bookings(db, BookingStatus.PENDING, email)


@router.get("/approved/{email}", response_model=list[BookingOut])
async def list_my_approved_bookings(
    email: str,
    member: User = Depends(require_member),
    db: AsyncSession = Depends(get_db),
):
    if member.email != email:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden access")
    return await _list_bookings(db, BookingStatus.APPROVED, email)


@router.get("/{booking_id}", response_model=BookingOut | None)
async def get_booking(
    booking_id: int,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await db.get(Booking, booking_id)


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


@router.patch("/cancel/{booking_id}", response_model=BookingOut)
async def cancel_booking(
    booking_id: int,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    booking = await _get_booking_or_404(db, booking_id)
    _require_pending(booking)

    booking.status = BookingStatus.CANCELLED
    booking.cancelled_at = datetime.now(UTC)
    await db.flush()
    logger.info("Booking %s cancelled by %s", booking_id, identity.email)
    return booking


@router.patch("/approve/{booking_id}", response_model=ApprovalResult)
async def approve_booking(
    booking_id: int,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Approve a booking and promote its owner to member.

    Both writes go through the request's session and commit together. A
    booking whose owner has no user record is still approved; the response
    reports ``user_updated: false``. Admins are never demoted to member.
    """
    booking = await _get_booking_or_404(db, booking_id)
    _require_pending(booking)

    now = datetime.now(UTC)
    booking.status = BookingStatus.APPROVED
    booking.approved_at = now
    await db.flush()

    result = await db.execute(
        update(User)
        .where(User.email == booking.user_email, User.role.is_distinct_from(UserRole.ADMIN))
        .values(role=UserRole.MEMBER, membership_date=now, updated_at=now)
    )
    user_updated = result.rowcount > 0
    if not user_updated:
        logger.warning(
            "Booking %s approved but %s was not promoted (no user record, or an admin)", booking_id, booking.user_email
        )

    logger.info("Admin %s approved booking %s", admin.email, booking_id)
    return ApprovalResult(message="Booking approved", booking_updated=True, user_updated=user_updated)


@router.delete("/reject/{booking_id}")
async def reject_booking(
    booking_id: int,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Reject a booking request. The booking is deleted, not kept as rejected."""
    result = await db.execute(delete(Booking).where(Booking.id == booking_id))
    if result.rowcount == 0:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")
    logger.info("Admin %s rejected booking %s", admin.email, booking_id)
    return {"message": "Booking rejected", "deleted_count": result.rowcount}


@router.delete("/{booking_id}")
async def delete_booking(
    booking_id: int,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    # TODO: restrict to the booking owner or an admin once the client sends owner-scoped deletes
    result = await db.execute(delete(Booking).where(Booking.id == booking_id))
    if result.rowcount == 0:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")
    logger.info("Booking %s deleted by %s", booking_id, identity.email)
    return {"message": "Booking deleted", "deleted_count": result.rowcount}
