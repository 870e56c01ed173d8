"""Category API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from storefront.api.deps import get_category_service
from storefront.api.schemas import (
    CategoryCreateRequest,
    CategoryListResponse,
    CategoryResponse,
    CategorySchema,
    DeleteRequest,
    ErrorResponse,
    SuccessResponse,
)
from storefront.catalog.service import CategoryService

router = APIRouter(prefix="/categories", tags=["Categories"])

ServiceDep = Annotated[CategoryService, Depends(get_category_service)]


@router.get("", response_model=CategoryListResponse, summary="List categories")
async def list_categories(service: ServiceDep) -> CategoryListResponse:
    """List categories sorted by name."""
    categories = await service.list_categories()
    return CategoryListResponse(
        categories=[CategorySchema.model_validate(c.to_dict()) for c in categories],
    )


@router.post(
    "",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    summary="Create category",
)
async def create_category(request: CategoryCreateRequest, service: ServiceDep) -> CategoryResponse:
    """Create a category; names are trimmed and must be unique."""
    category = await service.create_category(request.name)
    return CategoryResponse(category=CategorySchema.model_validate(category.to_dict()))


@router.delete(
    "",
    response_model=SuccessResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Delete category",
    description="Delete a category. Products keep the name in their category list.",
)
async def delete_category(request: DeleteRequest, service: ServiceDep) -> SuccessResponse:
    """Delete a category."""
    await service.delete_category(request.id)
    return SuccessResponse()
