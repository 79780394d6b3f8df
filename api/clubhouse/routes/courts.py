"""Court catalog routes: public paginated listing, admin management, bulk import."""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from clubhouse.core.config import settings
from clubhouse.core.database import get_db
from clubhouse.core.dependencies import require_admin
from clubhouse.models.court import Court
from clubhouse.models.user import User
from clubhouse.schemas import (
    IDENTIFIER_FIELDS,
    CourtCreate,
    CourtOut,
    CourtPage,
    CourtUpdate,
    split_document,
    strip_fields,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/courts", tags=["courts"])


MAX_PAGE_SIZE = 100
MAX_PAGE = 1_000_000


def parse_positive_int(value: str | None, default: int, maximum: int | None = None) -> int:
    """Parse a query value, falling back to the default when absent, non-numeric, < 1 or > maximum."""
    try:
        parsed = int(value) if value is not None else default
    except ValueError:
        return default
    if parsed < 1 or (maximum is not None and parsed > maximum):
        return default
    return parsed


def _court_from_payload(payload: dict[str, Any]) -> Court:
    body = CourtCreate.model_validate(strip_fields(payload, IDENTIFIER_FIELDS))
    fields, extra = split_document(body)
    return Court(**fields, extra=extra)


# ---------------------------------------------------------------------------
# Public endpoints
# ---------------------------------------------------------------------------


@router.get("", response_model=CourtPage)
async def list_courts(
    page: str | None = Query(None),
    limit: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """One page of courts. ``total`` is the size of the whole catalog."""
    page_number = parse_positive_int(page, 1, maximum=MAX_PAGE)
    page_size = min(parse_positive_int(limit, settings.courts_page_size), MAX_PAGE_SIZE)

    total = (await db.execute(select(func.count()).select_from(Court))).scalar_one()
    result = await db.execute(
        select(Court).order_by(Court.id).offset((page_number - 1) * page_size).limit(page_size)
    )
    return CourtPage(items=result.scalars().all(), total=total)


@router.get("/all", response_model=list[CourtOut])
async def list_all_courts(
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(select(Court).order_by(Court.id))
    return result.scalars().all()


@router.get("/{court_id}", response_model=CourtOut)
async def get_court(court_id: int, db: AsyncSession = Depends(get_db)):
    court = await db.get(Court, court_id)
    if court is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Court not found")
    return court


# ---------------------------------------------------------------------------
# Admin endpoints
# ---------------------------------------------------------------------------


@router.post("", response_model=CourtOut, status_code=status.HTTP_201_CREATED)
async def create_court(
    payload: dict[str, Any] = Body(...),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    try:
        court = _court_from_payload(payload)
    except ValidationError as exc:
        raise RequestValidationError(exc.errors()) from None
    db.add(court)
    await db.flush()
    return court


@router.post("/bulk", status_code=status.HTTP_201_CREATED)
async def bulk_insert_courts(
    payload: Any = Body(...),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Insert a list of courts in one go, e.g. from a seed file."""
    if not isinstance(payload, list) or not all(isinstance(item, dict) for item in payload):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Payload must be an array of courts")

    try:
        courts = [_court_from_payload(item) for item in payload]
    except ValidationError as exc:
        raise RequestValidationError(exc.errors()) from None

    db.add_all(courts)
    await db.flush()
    logger.info("Bulk inserted %d courts", len(courts))
    return {"message": "Courts inserted", "inserted_count": len(courts), "inserted_ids": [c.id for c in courts]}


@router.put("/{court_id}", response_model=CourtOut)
async def update_court(
    court_id: int,
    payload: dict[str, Any] = Body(...),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Partial update. Identifier fields in the body are dropped; unknown fields merge into ``extra``."""
    try:
        body = CourtUpdate.model_validate(strip_fields(payload, IDENTIFIER_FIELDS))
    except ValidationError as exc:
        raise RequestValidationError(exc.errors()) from None

    court = await db.get(Court, court_id)
    if court is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Court not found")

    fields, extra = split_document(body, exclude_unset=True)
    for key, value in fields.items():
        setattr(court, key, value)
    if extra:
        # Reassign so the JSON column is flagged dirty
        court.extra = {**(court.extra or {}), **extra}

    await db.flush()
    return court


@router.delete("/{court_id}")
async def delete_court(
    court_id: int,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(delete(Court).where(Court.id == court_id))
    if result.rowcount == 0:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Court not found")
    logger.info("Admin %s deleted court %s", admin.email, court_id)
    return {"message": "Court deleted", "deleted_count": result.rowcount}
