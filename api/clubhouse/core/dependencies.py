"""FastAPI dependencies for injection into route handlers."""

import logging
from collections.abc import Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from clubhouse.core.database import get_db
from clubhouse.core.identity import Identity, IdentityError, verify_id_token
from clubhouse.models.user import User, UserRole

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------


async def get_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Identity:
    """Verify the bearer token with the identity provider."""
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized access")

    try:
        return await verify_id_token(credentials.credentials)
    except IdentityError as exc:
        logger.info("Rejected identity token: %s", exc)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden access") from None


# ---------------------------------------------------------------------------
# Role gate
# ---------------------------------------------------------------------------


def require_roles(*allowed_roles: UserRole) -> Callable:
    """Factory: return a dependency that enforces the caller's user record holds one of the roles.

    Usage in a route:
        @router.get("/admin-thing")
        async def admin_thing(user: User = Depends(require_roles(UserRole.ADMIN))):
            ...
    """

    async def _check(
        identity: Identity = Depends(get_identity),
        db: AsyncSession = Depends(get_db),
    ) -> User:
        try:
            result = await db.execute(select(User).where(User.email == identity.email))
            user = result.scalar_one_or_none()
        except SQLAlchemyError:
            logger.exception("Role lookup failed for %s", identity.email)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to verify role"
            ) from None

        if user is None or user.effective_role not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Requires one of: {', '.join(r.value for r in allowed_roles)}",
            )
        return user

    return _check


# Convenience shortcuts
require_admin = require_roles(UserRole.ADMIN)
require_member = require_roles(UserRole.MEMBER)


async def is_admin(identity: Identity, db: AsyncSession) -> bool:
    """Whether the verified caller is an admin. For owner-or-admin checks inside handlers."""
    result = await db.execute(select(User.role).where(User.email == identity.email))
    return result.scalar_one_or_none() == UserRole.ADMIN
