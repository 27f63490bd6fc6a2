"""Publisher dashboard router."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from newsdesk.auth.dependencies import require_publisher
from newsdesk.database import get_db
from newsdesk.models.user import User
from newsdesk.routers.admin import statistics_response
from newsdesk.schemas.admin import StatisticsResponse
from newsdesk.services.statistics import collect_statistics

router = APIRouter(prefix="/api/v1/publisher", tags=["Publisher"])


@router.get(
    "/statistics",
    response_model=StatisticsResponse,
    status_code=status.HTTP_200_OK,
)
async def publisher_statistics(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_publisher),
) -> StatisticsResponse:
    """Counts, views and top articles for the caller's own articles."""
    return statistics_response(await collect_statistics(db, author_id=user.id))
