"""JWT token creation and validation for admin and publisher sessions."""

from datetime import datetime, timedelta, timezone

from jose import jwt

from newsdesk.config import settings
from newsdesk.models.user import Role

ALGORITHM = "HS256"


def create_access_token(user_id: int, role: Role) -> str:
    """Create an access token carrying the user id and role."""
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)
    payload = {
        "sub": str(user_id),
        "role": role.value,
        "exp": expire,
        "type": "access",
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=ALGORITHM)


def decode_token(token: str) -> dict | None:
    """
    Decode and validate a JWT token.

    Returns the payload if valid, None if invalid or expired.
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[ALGORITHM])
        return payload
    except jwt.JWTError:
        return None
