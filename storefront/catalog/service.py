"""Catalog services for products, categories, banners and uploads.

High-level services that combine payload validation, repository
operations and the asset store.
"""

import asyncio
from collections.abc import Iterable, Mapping
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.catalog.listing import ListingQuery, PaginatedResult, ProductSort
from storefront.catalog.models import Banner, Category, Product
from storefront.catalog.payloads import (
    parse_banner_draft,
    parse_category_name,
    parse_identifier,
    parse_product_draft,
)
from storefront.catalog.repository import BannerRepository, CategoryRepository, ProductRepository
from storefront.domain.exceptions import BadRequestError, CatalogError, NotFoundError
from storefront.infrastructure.asset_store import AssetStoreClient, UploadedAsset
from storefront.infrastructure.config import settings

logger = structlog.get_logger()


async def purge_assets(
    asset_store: AssetStoreClient,
    public_ids: Iterable[str],
    entity_type: str,
    entity_id: str,
) -> int:
    """Delete hosted assets, logging failures instead of raising.

    This is the first step of an entity delete; the record is removed
    afterwards whatever happens here.

    Args:
        asset_store: Asset store client.
        public_ids: Storage identifiers to delete.
        entity_type: Owning entity type, for logging.
        entity_id: Owning entity ID, for logging.

    Returns:
        Number of assets actually removed.
    """
    removed = 0
    for public_id in public_ids:
        try:
            if await asset_store.delete(public_id):
                removed += 1
            else:
                logger.info(
                    "Asset already gone",
                    entity_type=entity_type,
                    entity_id=entity_id,
                    public_id=public_id,
                )
        except CatalogError as e:
            logger.warning(
                "Asset cleanup failed",
                entity_type=entity_type,
                entity_id=entity_id,
                public_id=public_id,
                error=e.message,
            )
    return removed


# ============================================================================
# Products
# ============================================================================


class CatalogService:
    """Service for product operations.

    Example usage:
        async with get_session_factory()() as session:
            service = CatalogService(session, get_asset_store())
            results = await service.list_products(
                ListingQuery(category="Weight Management", max_price=500, limit=6),
            )
    """

    def __init__(self, session: AsyncSession, asset_store: AssetStoreClient) -> None:
        """Initialize service with database session.

        Args:
            session: Async SQLAlchemy session.
            asset_store: Client used for image cleanup.
        """
        self.session = session
        self.repository = ProductRepository(session)
        self.asset_store = asset_store

    async def list_products(self, query: ListingQuery) -> PaginatedResult[Product]:
        """List products for the shop or the admin table.

        Admin listings return every product, newest first, on a single
        page. Shop listings are filtered, sorted and paginated.

        Args:
            query: Parsed listing parameters.

        Returns:
            Paginated product results.
        """
        if query.admin:
            everything = await self.repository.find_all(
                listed_only=False,
                sort=ProductSort.BEST_SELLER,
            )
            return PaginatedResult(
                items=list(everything),
                total=len(everything),
                page=1,
                page_size=max(len(everything), 1),
            )

        total = await self.repository.count(
            category=query.category,
            max_price=query.max_price,
            listed_only=query.listed_only,
        )

        # No listing query for pages that start past the last match
        products: list[Product] = []
        if query.offset < total:
            products = list(
                await self.repository.find_all(
                    category=query.category,
                    max_price=query.max_price,
                    listed_only=query.listed_only,
                    sort=query.sort,
                    limit=query.limit,
                    offset=query.offset,
                )
            )

        return PaginatedResult(
            items=products,
            total=total,
            page=query.page,
            page_size=query.limit,
        )

    async def get_product(self, identifier: str, include_unlisted: bool = False) -> Product:
        """Get a product by ID or slug.

        Args:
            identifier: Product ID or slug.
            include_unlisted: Whether unlisted products may be returned.

        Returns:
            The product.

        Raises:
            NotFoundError: If nothing matches, or the match is unlisted.
        """
        product = await self.repository.get(identifier)
        if product is None or (not product.is_listed and not include_unlisted):
            raise NotFoundError("Product", identifier)
        return product

    async def create_product(self, payload: Mapping[str, Any]) -> Product:
        """Validate and insert a product.

        Args:
            payload: Raw product submission.

        Returns:
            The stored product, re-read from the database.

        Raises:
            BadRequestError: If the payload is invalid.
            ConflictError: If the slug is taken.
        """
        draft = parse_product_draft(payload)
        product = await self.repository.create(draft)
        await self.session.commit()

        logger.info("Product created", product_id=product.id, slug=product.slug)
        return await self._refetch(product.id)

    async def update_product(self, payload: Mapping[str, Any]) -> Product:
        """Validate and replace an existing product.

        Args:
            payload: Raw product submission including ``id``.

        Returns:
            The stored product, re-read from the database.

        Raises:
            BadRequestError: If the payload is invalid or has no id.
            NotFoundError: If the id does not exist.
            ConflictError: If the new slug belongs to another product.
        """
        product_id = parse_identifier(payload.get("id"))
        draft = parse_product_draft(payload)

        product = await self.repository.replace(product_id, draft)
        if product is None:
            raise NotFoundError("Product", product_id)
        await self.session.commit()

        logger.info("Product updated", product_id=product_id, slug=draft.slug)
        return await self._refetch(product_id)

    async def delete_product(self, product_id: Any) -> None:
        """Delete a product, cleaning up its images first.

        Args:
            product_id: Product ID.

        Raises:
            NotFoundError: If the id does not exist.
        """
        product_id = parse_identifier(product_id)
        product = await self.repository.get_by_id(product_id)
        if product is None:
            raise NotFoundError("Product", product_id)

        if settings.purge_product_assets:
            await purge_assets(self.asset_store, product.public_ids, "Product", product_id)

        await self.repository.delete(product_id)
        await self.session.commit()
        logger.info("Product deleted", product_id=product_id)

    async def _refetch(self, product_id: str) -> Product:
        product = await self.repository.get_by_id(product_id)
        if product is None:
            raise NotFoundError("Product", product_id)
        return product


# ============================================================================
# Categories
# ============================================================================


class CategoryService:
    """Service for category operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.repository = CategoryRepository(session)

    async def list_categories(self) -> list[Category]:
        """List categories by name."""
        return list(await self.repository.find_all())

    async def create_category(self, name: Any) -> Category:
        """Create a category.

        Raises:
            BadRequestError: If the name is blank.
            ConflictError: If the name already exists.
        """
        category = await self.repository.create(parse_category_name(name))
        await self.session.commit()
        logger.info("Category created", category_id=category.id, name=category.name)
        return category

    async def delete_category(self, category_id: Any) -> None:
        """Delete a category by ID.

        Products that list the category name keep it.

        Raises:
            NotFoundError: If the id does not exist.
        """
        category_id = parse_identifier(category_id)
        if not await self.repository.delete(category_id):
            raise NotFoundError("Category", category_id)
        await self.session.commit()
        logger.info("Category deleted", category_id=category_id)


# ============================================================================
# Banners
# ============================================================================


class BannerService:
    """Service for banner operations."""

    def __init__(self, session: AsyncSession, asset_store: AssetStoreClient) -> None:
        self.session = session
        self.repository = BannerRepository(session)
        self.asset_store = asset_store

    async def list_banners(self) -> list[Banner]:
        """List banners in slider order."""
        return list(await self.repository.find_all())

    async def create_banner(self, payload: Mapping[str, Any]) -> Banner:
        """Create a banner.

        Raises:
            BadRequestError: If the image is missing or order is not numeric.
        """
        draft = parse_banner_draft(payload, default_link=settings.default_banner_link)
        banner = await self.repository.create(draft)
        await self.session.commit()
        logger.info("Banner created", banner_id=banner.id, link=banner.link)
        return banner

    async def delete_banner(self, banner_id: Any) -> None:
        """Delete a banner, removing its image from the asset store first.

        Raises:
            NotFoundError: If the id does not exist.
        """
        banner_id = parse_identifier(banner_id)
        banner = await self.repository.get_by_id(banner_id)
        if banner is None:
            raise NotFoundError("Banner", banner_id)

        public_id = (banner.image or {}).get("public_id")
        if public_id:
            await purge_assets(self.asset_store, [public_id], "Banner", banner_id)

        await self.repository.delete(banner_id)
        await self.session.commit()
        logger.info("Banner deleted", banner_id=banner_id)


# ============================================================================
# Uploads
# ============================================================================


async def upload_images(asset_store: AssetStoreClient, files: list[bytes]) -> list[UploadedAsset]:
    """Upload images concurrently.

    Args:
        asset_store: Asset store client.
        files: Raw image bytes, one entry per file.

    Returns:
        Uploaded assets in input order.

    Raises:
        BadRequestError: If no file was given.
        UploadError: If any upload fails.
    """
    if not files:
        raise BadRequestError("No file uploaded", field="files")

    return list(await asyncio.gather(*(asset_store.upload(data) for data in files)))
