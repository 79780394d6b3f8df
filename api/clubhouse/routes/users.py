"""User routes: sign-in registration, role lookup, admin listing and removal."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from clubhouse.core.database import get_db
from clubhouse.core.dependencies import get_identity, require_admin
from clubhouse.core.identity import Identity
from clubhouse.models.user import User, UserRole
from clubhouse.schemas import RoleOut, UserCreate, UserCreateResult, UserOut

logger = logging.getLogger(__name__)

router = APIRouter(tags=["users"])


def _search_clause(search: str | None):
    """Case-insensitive substring match over name or email."""
    if not search:
        return None
    pattern = f"%{search}%"
    return or_(User.name.ilike(pattern), User.email.ilike(pattern))


@router.post("/users", response_model=UserCreateResult, status_code=status.HTTP_201_CREATED)
async def create_user(body: UserCreate, db: AsyncSession = Depends(get_db)):
    """Save a signed-in user unless one with the same email already exists.

    Check-then-insert, not atomic: two concurrent first sign-ins can both pass
    the check, and the loser hits the unique index.
    """
    existing = await db.execute(select(User.id).where(User.email == body.email))
    if existing.scalar_one_or_none() is not None:
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content=UserCreateResult(message="User already exists", inserted=False).model_dump(),
        )

    user = User(email=body.email, name=body.name, photo_url=body.photo_url)
    db.add(user)
    await db.flush()
    logger.info("Created user %s", user.email)

    return UserCreateResult(message="User created", inserted=True, id=user.id)


@router.get("/users", response_model=list[UserOut])
async def list_users(
    search: str | None = Query(None),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    query = select(User).order_by(User.created_at.desc(), User.id.desc())
    clause = _search_clause(search)
    if clause is not None:
        query = query.where(clause)
    result = await db.execute(query)
    return result.scalars().all()


@router.get("/users/role/{email}", response_model=RoleOut)
async def get_user_role(email: str, db: AsyncSession = Depends(get_db)):
    """Public role lookup. Plain users have no stored role and report "user"."""
    if not email.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email is required")

    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return RoleOut(role=user.effective_role.value)


@router.get("/users/{email}", response_model=UserOut | None)
async def get_user(
    email: str,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


@router.delete("/users/{user_id}")
async def delete_user(
    user_id: int,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(delete(User).where(User.id == user_id))
    if result.rowcount == 0:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    logger.info("Admin %s deleted user %s", admin.email, user_id)
    return {"message": "User deleted", "deleted_count": result.rowcount}


# ---------------------------------------------------------------------------
# Members
# ---------------------------------------------------------------------------


@router.get("/members", response_model=list[UserOut])
async def list_members(
    search: str | None = Query(None),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    query = select(User).where(User.role == UserRole.MEMBER).order_by(User.membership_date.desc(), User.id.desc())
    clause = _search_clause(search)
    if clause is not None:
        query = query.where(clause)
    result = await db.execute(query)
    return result.scalars().all()


@router.delete("/members/{user_id}")
async def delete_member(
    user_id: int,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(delete(User).where(User.id == user_id, User.role == UserRole.MEMBER))
    if result.rowcount == 0:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Member not found")
    logger.info("Admin %s removed member %s", admin.email, user_id)
    return {"message": "Member deleted", "deleted_count": result.rowcount}
