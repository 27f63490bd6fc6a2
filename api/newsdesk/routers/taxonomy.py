"""Category and tag routers: public listings and admin management."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from newsdesk.auth.dependencies import get_optional_user, require_admin
from newsdesk.database import get_db
from newsdesk.models.category import Category
from newsdesk.models.tag import Tag
from newsdesk.models.user import User
from newsdesk.schemas.taxonomy import (
    CategoryResponse,
    CreateCategoryRequest,
    CreateTagRequest,
    ListCategoriesResponse,
    ListTagsResponse,
    TagResponse,
    UpdateCategoryRequest,
    UpdateTagRequest,
)
from newsdesk.services.taxonomy import CategoryStore, TagStore

router = APIRouter(prefix="/api/v1", tags=["Taxonomy"])
admin_router = APIRouter(prefix="/api/v1/admin", tags=["Admin"])


def _category(category: Category) -> CategoryResponse:
    return CategoryResponse(
        id=category.id,
        name=category.name,
        slug=category.slug,
        is_admin_only=category.is_admin_only,
        display_order=category.display_order,
    )


def _tag(tag: Tag) -> TagResponse:
    return TagResponse(id=tag.id, name=tag.name, slug=tag.slug)


# --- Public ---


@router.get(
    "/categories",
    response_model=ListCategoriesResponse,
    status_code=status.HTTP_200_OK,
)
async def list_categories(
    db: AsyncSession = Depends(get_db),
    user: User | None = Depends(get_optional_user),
) -> ListCategoriesResponse:
    """Categories in display order; admin-only ones are listed for admins only."""
    include_admin_only = user is not None and user.is_admin
    categories = await CategoryStore(db).list_all(include_admin_only=include_admin_only)
    return ListCategoriesResponse(items=[_category(c) for c in categories])


@router.get(
    "/tags",
    response_model=ListTagsResponse,
    status_code=status.HTTP_200_OK,
)
async def list_tags(db: AsyncSession = Depends(get_db)) -> ListTagsResponse:
    tags = await TagStore(db).list_all()
    return ListTagsResponse(items=[_tag(t) for t in tags])


# --- Admin: categories ---


@admin_router.post(
    "/categories",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_category(
    data: CreateCategoryRequest,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> CategoryResponse:
    """Create a category, restoring a deleted one with the same slug."""
    category = await CategoryStore(db).create(
        data.name,
        is_admin_only=data.is_admin_only,
        display_order=data.display_order,
    )
    return _category(category)


@admin_router.patch(
    "/categories/{category_id}",
    response_model=CategoryResponse,
    status_code=status.HTTP_200_OK,
)
async def update_category(
    category_id: int,
    data: UpdateCategoryRequest,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> CategoryResponse:
    store = CategoryStore(db)
    category = await store.update(
        await store.require(category_id),
        name=data.name,
        is_admin_only=data.is_admin_only,
        display_order=data.display_order,
    )
    return _category(category)


@admin_router.delete(
    "/categories/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_category(
    category_id: int,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> None:
    """Delete a category. Fails with 409 while live articles use it."""
    store = CategoryStore(db)
    await store.delete(await store.require(category_id))


# --- Admin: tags ---


@admin_router.post(
    "/tags",
    response_model=TagResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_tag(
    data: CreateTagRequest,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> TagResponse:
    return _tag(await TagStore(db).create(data.name))


@admin_router.patch(
    "/tags/{tag_id}",
    response_model=TagResponse,
    status_code=status.HTTP_200_OK,
)
async def update_tag(
    tag_id: int,
    data: UpdateTagRequest,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> TagResponse:
    store = TagStore(db)
    return _tag(await store.update(await store.require(tag_id), name=data.name))


@admin_router.delete(
    "/tags/{tag_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_tag(
    tag_id: int,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> None:
    """Delete a tag. Fails with 409 while live articles carry it."""
    store = TagStore(db)
    await store.delete(await store.require(tag_id))
