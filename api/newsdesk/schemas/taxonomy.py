"""Category and tag schemas."""

from pydantic import BaseModel, field_validator


def _validate_name(v: str) -> str:
    if not v.strip():
        raise ValueError("Name cannot be empty")
    if len(v) > 100:
        raise ValueError("Name must be 100 characters or less")
    return v.strip()


class CategoryResponse(BaseModel):
    id: int
    name: str
    slug: str
    is_admin_only: bool
    display_order: int


class ListCategoriesResponse(BaseModel):
    items: list[CategoryResponse]


class CreateCategoryRequest(BaseModel):
    """Request to create a category. A non-positive order places it last."""

    name: str
    is_admin_only: bool = False
    display_order: int = 0

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _validate_name(v)


class UpdateCategoryRequest(BaseModel):
    name: str | None = None
    is_admin_only: bool | None = None
    display_order: int | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        return _validate_name(v) if v is not None else None


class TagResponse(BaseModel):
    id: int
    name: str
    slug: str


class ListTagsResponse(BaseModel):
    items: list[TagResponse]


class CreateTagRequest(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _validate_name(v)


class UpdateTagRequest(BaseModel):
    name: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        return _validate_name(v) if v is not None else None
