"""Authentication dependencies for FastAPI endpoints."""

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from newsdesk.auth.jwt import decode_token
from newsdesk.database import get_db
from newsdesk.models.user import Role, User
from newsdesk.services.identity_store import IdentityStore


def _unauthorized(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={
            "error": {
                "code": "UNAUTHORIZED",
                "message": message,
            }
        },
        headers={"WWW-Authenticate": "Bearer"},
    )


def _forbidden(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail={
            "error": {
                "code": "FORBIDDEN",
                "message": message,
            }
        },
    )


async def _resolve_user(authorization: str, db: AsyncSession) -> User:
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise _unauthorized("Invalid Authorization header format")

    payload = decode_token(token)
    if payload is None or payload.get("type") != "access":
        raise _unauthorized("Invalid or expired token")

    try:
        user_id = int(payload["sub"])
        Role(payload["role"])
    except (KeyError, TypeError, ValueError):
        raise _unauthorized("Invalid token claims")

    user = await IdentityStore(db).get(user_id)
    if user is None:
        # Deleted since the token was issued
        raise _unauthorized("User no longer exists")

    return user


async def get_current_user(
    authorization: str | None = Header(default=None),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Validate the bearer token and return the authenticated user.

    The role is always taken from the stored account, not the token, so a
    role change takes effect immediately.

    Raises:
        HTTPException: 401 if the token is missing, invalid, or expired
    """
    if not authorization:
        raise _unauthorized("Authorization header required")
    return await _resolve_user(authorization, db)


async def get_optional_user(
    authorization: str | None = Header(default=None),
    db: AsyncSession = Depends(get_db),
) -> User | None:
    """Like ``get_current_user`` but anonymous callers yield ``None``."""
    if not authorization:
        return None
    return await _resolve_user(authorization, db)


async def require_admin(user: User = Depends(get_current_user)) -> User:
    """
    Require the authenticated user to have the admin role.

    Raises:
        HTTPException: 403 if user is not an admin
    """
    if user.role != Role.ADMIN:
        raise _forbidden("Admin access required")
    return user


async def require_publisher(user: User = Depends(get_current_user)) -> User:
    """Require the authenticated user to be a publisher."""
    if user.role != Role.PUBLISHER:
        raise _forbidden("Publisher access required")
    return user
