"""Identity token verification.

Bearer tokens are issued by an external identity provider. In production that
is Firebase Authentication; for local development and tests, HS256 tokens
signed with a shared secret stand in for it.
"""

import base64
import json
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from functools import lru_cache

import firebase_admin
from fastapi.concurrency import run_in_threadpool
from firebase_admin import auth as firebase_auth
from firebase_admin import credentials
from jose import JWTError, jwt

from clubhouse.core.config import settings

logger = logging.getLogger(__name__)

PROVIDER_FIREBASE = "firebase"
PROVIDER_LOCAL = "local"


class IdentityError(Exception):
    """The identity provider rejected the token."""


@dataclass(frozen=True)
class Identity:
    email: str
    uid: str | None = None
    claims: dict = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Firebase
# ---------------------------------------------------------------------------


@lru_cache
def _firebase_app() -> firebase_admin.App:
    """Initialise the Firebase app once from the base64 service account key."""
    if not settings.firebase_service_key:
        raise IdentityError("Firebase service key is not configured")
    service_account = json.loads(base64.b64decode(settings.firebase_service_key).decode("utf-8"))
    app = firebase_admin.initialize_app(credentials.Certificate(service_account))
    logger.info("Firebase app initialised for project %s", service_account.get("project_id"))
    return app


def _verify_firebase(token: str) -> dict:
    try:
        return firebase_auth.verify_id_token(token, app=_firebase_app())
    except (ValueError, firebase_auth.InvalidIdTokenError, firebase_auth.CertificateFetchError) as exc:
        raise IdentityError(str(exc)) from exc


# ---------------------------------------------------------------------------
# Local (shared secret)
# ---------------------------------------------------------------------------


def create_local_id_token(email: str, uid: str | None = None, expires_minutes: int | None = None) -> str:
    """Mint a token the local provider accepts. For dev, seed scripts and tests."""
    minutes = settings.identity_token_expire_minutes if expires_minutes is None else expires_minutes
    expire = datetime.now(UTC) + timedelta(minutes=minutes)
    payload = {"sub": uid or email, "email": email, "exp": expire}
    return jwt.encode(payload, settings.identity_secret, algorithm=settings.identity_algorithm)


def _verify_local(token: str) -> dict:
    try:
        return jwt.decode(token, settings.identity_secret, algorithms=[settings.identity_algorithm])
    except JWTError as exc:
        raise IdentityError(str(exc)) from exc


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


async def verify_id_token(token: str) -> Identity:
    """Verify a bearer token with the configured provider. Raises IdentityError on failure.

    Nothing is cached: every call goes back to the provider.
    """
    if settings.identity_provider == PROVIDER_FIREBASE:
        # verify_id_token may fetch signing certificates over the network
        claims = await run_in_threadpool(_verify_firebase, token)
    elif settings.identity_provider == PROVIDER_LOCAL:
        claims = _verify_local(token)
    else:
        raise IdentityError(f"Unknown identity provider: {settings.identity_provider}")

    email = claims.get("email")
    if not email:
        raise IdentityError("Token carries no email claim")
    return Identity(email=email, uid=claims.get("uid") or claims.get("sub"), claims=claims)
