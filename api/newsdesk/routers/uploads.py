"""Uploads router for article images."""

from fastapi import APIRouter, Depends, File, UploadFile, status

from newsdesk.auth.dependencies import get_current_user
from newsdesk.models.user import User
from newsdesk.schemas.articles import UploadImageResponse
from newsdesk.services.storage import (
    ObjectStorage,
    check_image_size,
    get_object_storage,
    upload_image,
)

router = APIRouter(prefix="/api/v1/uploads", tags=["Uploads"])


@router.post(
    "/images",
    response_model=UploadImageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def upload_article_image(
    image: UploadFile = File(...),
    user: User = Depends(get_current_user),
    storage: ObjectStorage = Depends(get_object_storage),
) -> UploadImageResponse:
    """Upload a thumbnail or inline image (max 10MB) and return its public URL."""
    # Oversized files are refused before being read into memory
    if image.size is not None:
        check_image_size(image.size)
    data = await image.read()
    result = await upload_image(storage, image.filename or "", data, image.content_type)
    return UploadImageResponse(**result)
