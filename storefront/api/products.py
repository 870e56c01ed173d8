"""Product API endpoints.

Provides the shop listing and the admin product CRUD endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from storefront.api.deps import get_catalog_service
from storefront.api.schemas import (
    DeleteRequest,
    ErrorResponse,
    ProductListResponse,
    ProductRequest,
    ProductResponse,
    ProductSchema,
    SuccessResponse,
)
from storefront.catalog.listing import ListingQuery
from storefront.catalog.models import Product
from storefront.catalog.payloads import coerce_flag
from storefront.catalog.service import CatalogService
from storefront.infrastructure.config import settings

router = APIRouter(prefix="/products", tags=["Products"])

ServiceDep = Annotated[CatalogService, Depends(get_catalog_service)]


def product_to_schema(product: Product) -> ProductSchema:
    """Convert Product model to response schema."""
    return ProductSchema.model_validate(product.to_dict())


# ============================================================================
# Endpoints
# ============================================================================


@router.get(
    "",
    response_model=ProductListResponse,
    responses={400: {"model": ErrorResponse}},
    summary="List products",
    description=(
        "Shop listing filtered by category and maxPrice, sorted and paginated. "
        "With admin=true every product is returned, including unlisted ones."
    ),
)
async def list_products(
    service: ServiceDep,
    category: Annotated[str | None, Query(description="Exact category name")] = None,
    max_price: Annotated[str | None, Query(alias="maxPrice", description="Maximum base price")] = None,
    sort: Annotated[
        str | None,
        Query(description="priceLowHigh, priceHighLow, AlphabeticalAZ, AlphabeticalZA or BestSeller"),
    ] = None,
    page: Annotated[str | None, Query(description="Page number (1-based)")] = None,
    limit: Annotated[str | None, Query(description="Items per page")] = None,
    admin: Annotated[str | None, Query(description="Admin mode")] = None,
) -> ProductListResponse:
    """List products.

    Raises:
        BadRequestError: On a non-numeric maxPrice or a non-positive page/limit.
    """
    query = ListingQuery.from_params(
        category=category,
        max_price=max_price,
        sort=sort,
        page=page,
        limit=limit,
        admin=admin,
        default_limit=settings.listing_page_size,
        max_limit=settings.listing_max_page_size,
    )
    result = await service.list_products(query)

    return ProductListResponse(
        products=[product_to_schema(p) for p in result.items],
        page=result.page,
        pages=result.total_pages,
        total=result.total,
    )


@router.get(
    "/{identifier}",
    response_model=ProductResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get product",
    description="Get a product by slug or ID. Unlisted products need admin=true.",
)
async def get_product(
    identifier: str,
    service: ServiceDep,
    admin: Annotated[str | None, Query(description="Admin mode")] = None,
) -> ProductResponse:
    """Get a single product."""
    product = await service.get_product(
        identifier,
        include_unlisted=coerce_flag(admin, "admin", False),
    )
    return ProductResponse(product=product_to_schema(product))


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    summary="Create product",
)
async def create_product(request: ProductRequest, service: ServiceDep) -> ProductResponse:
    """Create a product from an admin submission.

    At least one image must already be uploaded via ``POST /upload``.
    """
    product = await service.create_product(request.model_dump())
    return ProductResponse(product=product_to_schema(product))


@router.put(
    "",
    response_model=ProductResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
    summary="Replace product",
    description="Replace every field of the product identified by id.",
)
async def update_product(request: ProductRequest, service: ServiceDep) -> ProductResponse:
    """Replace a product."""
    product = await service.update_product(request.model_dump())
    return ProductResponse(product=product_to_schema(product))


@router.delete(
    "",
    response_model=SuccessResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Delete product",
    description="Delete a product. Its hosted images are removed on a best-effort basis.",
)
async def delete_product(request: DeleteRequest, service: ServiceDep) -> SuccessResponse:
    """Delete a product."""
    await service.delete_product(request.id)
    return SuccessResponse()
