"""Announcement routes. Anyone can read; admins publish, edit and remove."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from clubhouse.core.database import get_db
from clubhouse.core.dependencies import require_admin
from clubhouse.models.announcement import Announcement
from clubhouse.models.user import User
from clubhouse.schemas import AnnouncementCreate, AnnouncementOut, AnnouncementUpdate

router = APIRouter(prefix="/announcements", tags=["announcements"])


@router.get("", response_model=list[AnnouncementOut])
async def list_announcements(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Announcement).order_by(Announcement.created_at.desc(), Announcement.id.desc()))
    return result.scalars().all()


@router.get("/{announcement_id}", response_model=AnnouncementOut)
async def get_announcement(announcement_id: int, db: AsyncSession = Depends(get_db)):
    announcement = await db.get(Announcement, announcement_id)
    if announcement is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Announcement not found")
    return announcement


@router.post("", response_model=AnnouncementOut, status_code=status.HTTP_201_CREATED)
async def create_announcement(
    body: AnnouncementCreate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    announcement = Announcement(title=body.title, content=body.content)
    db.add(announcement)
    await db.flush()
    return announcement


@router.put("/{announcement_id}", response_model=AnnouncementOut)
async def update_announcement(
    announcement_id: int,
    body: AnnouncementUpdate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    announcement = await db.get(Announcement, announcement_id)
    if announcement is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Announcement not found")

    for key, value in body.model_dump(exclude_unset=True).items():
        setattr(announcement, key, value)
    await db.flush()
    return announcement


@router.delete("/{announcement_id}")
async def delete_announcement(
    announcement_id: int,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(delete(Announcement).where(Announcement.id == announcement_id))
    if result.rowcount == 0:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Announcement not found")
    return {"message": "Announcement deleted", "deleted_count": result.rowcount}
