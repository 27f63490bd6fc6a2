"""Authentication schemas for request/response validation."""

import re

from pydantic import BaseModel, field_validator

from newsdesk.schemas.users import UserMeResponse


class LoginRequest(BaseModel):
    """Username/password login request schema."""

    username: str
    password: str


class PublisherLoginRequest(BaseModel):
    """Publisher login with the phone number registered in the rewards app."""

    number: str
    password: str

    @field_validator("number")
    @classmethod
    def validate_number(cls, v: str) -> str:
        """Phone numbers are digits only and start with 8 (no country prefix)."""
        v = v.strip()
        if not re.match(r"^8[0-9]{5,19}$", v):
            raise ValueError("Phone number must start with 8 and contain only digits")
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters")
        return v


class TokenResponse(BaseModel):
    """Login response carrying a bearer token."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserMeResponse
