"""
Dashboard user authentication helpers.

The identity provider signs short-lived HS256 JWTs whose `sub` claim is the
user id. Dashboard requests carry them as `Authorization: Bearer <jwt>`.

issue_access_token() mints the same tokens locally; it is used by tooling
and tests, never by the request path.
"""
import logging
from datetime import datetime, timezone, timedelta
from fastapi import HTTPException, Header
from typing import Optional

import jwt

from config import settings

logger = logging.getLogger(__name__)


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _parse_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    token = parts[1].strip()
    return token or None


def decode_access_token(token: str) -> dict:
    if not settings.jwt_secret:
        raise HTTPException(
            status_code=500,
            detail="Server auth misconfigured (JWT secret missing).",
        )
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=["HS256"],
            issuer=settings.jwt_issuer,
            options={"require": ["exp", "iat", "iss", "sub"]},
        )
        return payload
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Access token expired.")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid access token.")


def issue_access_token(*, user_id: str, ttl_minutes: Optional[int] = None) -> str:
    now = _now_utc()
    ttl = ttl_minutes if ttl_minutes is not None else settings.jwt_access_ttl_minutes
    exp = now.replace(microsecond=0) + timedelta(minutes=ttl)
    payload = {
        "iss": settings.jwt_issuer,
        "sub": user_id,
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
    }
    if not settings.jwt_secret:
        raise HTTPException(
            status_code=500,
            detail="Server auth misconfigured (JWT secret missing).",
        )
    return jwt.encode(payload, settings.jwt_secret, algorithm="HS256")


async def get_authenticated_user(
    authorization: Optional[str] = Header(None, alias="Authorization"),
) -> Optional[str]:
    """
    Best-effort authentication for pages that also serve anonymous users.

    No header → None. A header with a bad token still raises 401.
    """
    token = _parse_bearer_token(authorization)
    if not token:
        return None
    payload = decode_access_token(token)
    return payload.get("sub")


async def require_user(
    authorization: Optional[str] = Header(None, alias="Authorization"),
) -> str:
    """Dependency for endpoints that need a signed-in dashboard user."""
    user_id = await get_authenticated_user(authorization=authorization)
    if not user_id:
        raise HTTPException(
            status_code=401,
            detail="Authentication required. Provide Authorization: Bearer <token>.",
        )
    return user_id
