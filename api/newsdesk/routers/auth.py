"""Authentication router for admin and publisher login."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from newsdesk.auth.jwt import create_access_token
from newsdesk.auth.password import hash_password, verify_password
from newsdesk.config import settings
from newsdesk.database import get_db
from newsdesk.middleware.rate_limit import limiter
from newsdesk.models.user import User
from newsdesk.schemas.auth import LoginRequest, PublisherLoginRequest, TokenResponse
from newsdesk.schemas.users import user_response
from newsdesk.services.identity_store import IdentityStore
from newsdesk.services.rewards import RewardsClient, get_rewards_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/auth", tags=["Auth"])

SUSPENDED = "Suspend"


def _invalid_credentials(message: str = "Invalid username or password") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={
            "error": {
                "code": "UNAUTHORIZED",
                "message": message,
            }
        },
    )


def _token_response(user: User) -> TokenResponse:
    return TokenResponse(
        access_token=create_access_token(user.id, user.role),
        expires_in=settings.access_token_expire_minutes * 60,
        user=user_response(user),
    )


@router.post(
    "/login",
    response_model=TokenResponse,
    status_code=status.HTTP_200_OK,
)
@limiter.limit(settings.login_rate_limit)
async def login(
    request: Request,
    data: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> TokenResponse:
    """Authenticate with username and password and return a bearer token."""
    user = await IdentityStore(db).get_by_username(data.username)

    if not user or not verify_password(data.password, user.password_hash):
        raise _invalid_credentials()

    if user.status == SUSPENDED:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "error": {
                    "code": "ACCOUNT_SUSPENDED",
                    "message": "Account is suspended",
                }
            },
        )

    return _token_response(user)


@router.post(
    "/publisher/login",
    response_model=TokenResponse,
    status_code=status.HTTP_200_OK,
)
@limiter.limit(settings.publisher_login_rate_limit)
async def publisher_login(
    request: Request,
    data: PublisherLoginRequest,
    db: AsyncSession = Depends(get_db),
    rewards: RewardsClient = Depends(get_rewards_client),
) -> TokenResponse:
    """
    Authenticate a publisher against the rewards app.

    On success the local publisher account is created or refreshed from the
    remote profile. An unreachable rewards API yields 502.
    """
    profile = await rewards.login(data.number, data.password)
    if not profile.success:
        raise _invalid_credentials(profile.message or "Invalid phone number or password")

    user = await IdentityStore(db).upsert_publisher(
        data.number,
        hash_password(data.password),
        profile,
    )
    await db.commit()
    logger.info("Publisher %s signed in (external id %s)", user.id, user.external_id)

    return _token_response(user)
