"""Authentication utilities for the Newsdesk API."""

from newsdesk.auth.jwt import create_access_token, decode_token
from newsdesk.auth.password import hash_password, verify_password

__all__ = [
    "hash_password",
    "verify_password",
    "create_access_token",
    "decode_token",
]
