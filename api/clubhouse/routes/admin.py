"""Admin dashboard routes."""

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from clubhouse.core.database import get_db
from clubhouse.core.dependencies import require_admin
from clubhouse.models import Announcement, Booking, Court, User, UserRole
from clubhouse.schemas import BookingCounts, StatsOut

router = APIRouter(prefix="/admin", tags=["admin"])


async def _count(db: AsyncSession, model, *where) -> int:
    query = select(func.count()).select_from(model)
    if where:
        query = query.where(*where)
    return (await db.execute(query)).scalar_one()


@router.get("/stats", response_model=StatsOut)
async def get_stats(
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    by_status = await db.execute(select(Booking.status, func.count()).group_by(Booking.status))
    bookings = BookingCounts(**{row[0].value: row[1] for row in by_status.all()})

    return StatsOut(
        users=await _count(db, User),
        members=await _count(db, User, User.role == UserRole.MEMBER),
        admins=await _count(db, User, User.role == UserRole.ADMIN),
        courts=await _count(db, Court),
        announcements=await _count(db, Announcement),
        bookings=bookings,
    )
