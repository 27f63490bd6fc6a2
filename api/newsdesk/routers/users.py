"""Users router for the caller's own account."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from newsdesk.auth.dependencies import get_current_user
from newsdesk.auth.password import hash_password
from newsdesk.database import get_db
from newsdesk.errors import ConflictError
from newsdesk.models.user import User
from newsdesk.schemas.users import UpdateMeRequest, UserMeResponse, user_response
from newsdesk.services.identity_store import IdentityStore

router = APIRouter(prefix="/api/v1/users", tags=["Users"])


@router.get(
    "/me",
    response_model=UserMeResponse,
    status_code=status.HTTP_200_OK,
)
async def get_current_user_profile(
    user: User = Depends(get_current_user),
) -> UserMeResponse:
    """Get the authenticated user's account."""
    return user_response(user)


@router.patch(
    "/me",
    response_model=UserMeResponse,
    status_code=status.HTTP_200_OK,
)
async def update_current_user_profile(
    data: UpdateMeRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> UserMeResponse:
    """
    Update the authenticated user's username, name or password.

    Usernames must stay unique across all accounts.
    """
    store = IdentityStore(db)

    if data.username and data.username != user.username:
        if await store.username_taken(data.username, exclude_id=user.id):
            raise ConflictError("Username already exists", username=data.username)
        user.username = data.username
    if data.name:
        user.name = data.name
    if data.password:
        user.password_hash = hash_password(data.password)

    await store.save(user)
    return user_response(user)
