"""Banner API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from storefront.api.deps import get_banner_service
from storefront.api.schemas import (
    BannerCreateRequest,
    BannerListResponse,
    BannerResponse,
    BannerSchema,
    DeleteRequest,
    ErrorResponse,
    SuccessResponse,
)
from storefront.catalog.service import BannerService

router = APIRouter(prefix="/banners", tags=["Banners"])

ServiceDep = Annotated[BannerService, Depends(get_banner_service)]


@router.get("", response_model=BannerListResponse, summary="List banners")
async def list_banners(service: ServiceDep) -> BannerListResponse:
    """List banners in slider order."""
    banners = await service.list_banners()
    return BannerListResponse(
        banners=[BannerSchema.model_validate(b.to_dict()) for b in banners],
    )


@router.post(
    "",
    response_model=BannerResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
    summary="Create banner",
)
async def create_banner(request: BannerCreateRequest, service: ServiceDep) -> BannerResponse:
    """Create a banner from an uploaded image."""
    banner = await service.create_banner(request.model_dump())
    return BannerResponse(banner=BannerSchema.model_validate(banner.to_dict()))


@router.delete(
    "",
    response_model=SuccessResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Delete banner",
    description="Delete a banner after removing its image from the asset store (best effort).",
)
async def delete_banner(request: DeleteRequest, service: ServiceDep) -> SuccessResponse:
    """Delete a banner."""
    await service.delete_banner(request.id)
    return SuccessResponse()
