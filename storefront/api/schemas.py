"""API schemas for the storefront admin API.

Pydantic models for request/response serialization. JSON keys are
camelCase on the wire; requests also accept snake_case.
"""

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model with camelCase JSON keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    success: bool = Field(default=False, description="Always false for errors")
    error: str = Field(..., description="Human-readable error message")
    error_code: str = Field(..., description="Machine-readable error code")
    details: dict[str, Any] = Field(default_factory=dict, description="Additional error context")
    request_id: str | None = Field(default=None, description="Request ID for correlation")


class SuccessResponse(BaseModel):
    """Acknowledgement without a payload."""

    success: bool = True


class DeleteRequest(BaseModel):
    """Request body for DELETE endpoints."""

    id: Any = Field(default=None, description="Identifier of the record to delete")


class ImageSchema(CamelModel):
    """Hosted image reference."""

    url: str = Field(..., description="Public image URL")
    public_id: str | None = Field(
        default=None,
        alias="public_id",
        validation_alias=AliasChoices("public_id", "publicId"),
        description="Asset store identifier",
    )


# ============================================================================
# Product Schemas
# ============================================================================


class SizeSchema(CamelModel):
    """Size variant."""

    label: str
    price: float | None = None
    old_price: float | None = None
    image: ImageSchema | None = None


class ProductSchema(CamelModel):
    """Product as returned by the API."""

    id: str
    name: str
    slug: str
    description: str | None = None
    price: float
    old_price: float | None = None
    images: list[ImageSchema] = Field(default_factory=list)
    sizes: list[SizeSchema] = Field(default_factory=list)
    colors: list[str] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)
    is_best_seller: bool = False
    is_most_popular: bool = False
    is_listed: bool = True
    created_at: datetime
    updated_at: datetime


class ProductRequest(CamelModel):
    """Product create/update submission.

    Fields are loosely typed on purpose; numbers may arrive as text and
    are validated by the catalog service.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: Any = Field(default=None, description="Product ID (required for updates)")
    name: Any = Field(default=None, description="Product name")
    slug: Any = Field(default=None, description="Unique URL slug")
    description: Any = None
    price: Any = Field(default=None, description="Base price")
    old_price: Any = Field(default=None, description="Strike-through price")
    images: Any = Field(default=None, description="List of {url, public_id}")
    sizes: Any = Field(default=None, description="List of {label, price, oldPrice, image}")
    colors: Any = None
    categories: Any = Field(
        default=None,
        validation_alias=AliasChoices("categories", "category"),
        description="Category names",
    )
    is_best_seller: Any = None
    is_most_popular: Any = None
    is_listed: Any = None


class ProductResponse(BaseModel):
    """Single product response."""

    success: bool = True
    product: ProductSchema


class ProductListResponse(BaseModel):
    """Product listing with pagination envelope."""

    success: bool = True
    products: list[ProductSchema]
    page: int = Field(..., description="Current page number")
    pages: int = Field(..., description="Total number of pages")
    total: int = Field(..., description="Total number of matching products")


# ============================================================================
# Category Schemas
# ============================================================================


class CategorySchema(CamelModel):
    """Category as returned by the API."""

    id: str
    name: str
    created_at: datetime
    updated_at: datetime


class CategoryCreateRequest(BaseModel):
    """Request to create a category."""

    name: Any = Field(default=None, description="Category name")


class CategoryResponse(BaseModel):
    """Single category response."""

    success: bool = True
    category: CategorySchema


class CategoryListResponse(BaseModel):
    """Category list response."""

    success: bool = True
    categories: list[CategorySchema]


# ============================================================================
# Banner Schemas
# ============================================================================


class BannerSchema(CamelModel):
    """Banner as returned by the API."""

    id: str
    image: ImageSchema
    link: str
    order: float
    created_at: datetime
    updated_at: datetime


class BannerCreateRequest(BaseModel):
    """Request to create a banner."""

    image: Any = Field(default=None, description="{url, public_id} of an uploaded image")
    link: Any = Field(default=None, description="Click-through target, defaults to /shop")
    order: Any = Field(default=None, description="Slider position, defaults to 0")


class BannerResponse(BaseModel):
    """Single banner response."""

    success: bool = True
    banner: BannerSchema


class BannerListResponse(BaseModel):
    """Banner list response."""

    success: bool = True
    banners: list[BannerSchema]


# ============================================================================
# Upload Schemas
# ============================================================================


class UploadResponse(BaseModel):
    """Uploaded images."""

    uploads: list[ImageSchema]
