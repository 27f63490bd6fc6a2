"""User-related Pydantic schemas."""

import re

from pydantic import BaseModel, field_validator

from newsdesk.models.user import Role, User


def validate_username(v: str) -> str:
    """3-64 chars: letters, numbers and underscores."""
    if not re.match(r"^[A-Za-z0-9_]{3,64}$", v):
        raise ValueError(
            "Username must be 3-64 characters, letters, numbers, and underscores only"
        )
    return v


def validate_password(v: str) -> str:
    if len(v) < 6:
        raise ValueError("Password must be at least 6 characters")
    return v


class UserMeResponse(BaseModel):
    """Response for GET /users/me endpoint."""

    id: int
    username: str
    name: str
    email: str
    role: Role
    external_id: int | None
    external_number: str | None
    balance: float
    status: str
    referral_code: str | None
    created_at: str


class UpdateMeRequest(BaseModel):
    """Request to update the caller's own account."""

    username: str | None = None
    name: str | None = None
    password: str | None = None

    @field_validator("username")
    @classmethod
    def check_username(cls, v: str | None) -> str | None:
        return validate_username(v) if v is not None else None

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str | None) -> str | None:
        return validate_password(v) if v is not None else None


def user_response(user: User) -> UserMeResponse:
    return UserMeResponse(
        id=user.id,
        username=user.username,
        name=user.name,
        email=user.email,
        role=user.role,
        external_id=user.external_id,
        external_number=user.external_number,
        balance=user.balance or 0.0,
        status=user.status,
        referral_code=user.referral_code,
        created_at=user.created_at.isoformat(),
    )
