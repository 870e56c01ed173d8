"""Catalog repositories for database operations.

Provides CRUD operations for products, categories and banners with
filtering, sorting and pagination.
"""

from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

import structlog
from sqlalchemy import and_, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from storefront.catalog.listing import ProductSort
from storefront.catalog.models import Banner, Category, Product, ProductCategory, ProductSize
from storefront.catalog.payloads import BannerDraft, ProductDraft
from storefront.domain.exceptions import ConflictError, InternalError

logger = structlog.get_logger()

UNIQUE_VIOLATION_SQLSTATE = "23505"


def is_unique_violation(error: IntegrityError) -> bool:
    """Tell a unique-constraint violation apart from other integrity errors.

    Args:
        error: Error raised by the driver on flush.

    Returns:
        True if a unique index rejected the write.
    """
    orig = error.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate == UNIQUE_VIOLATION_SQLSTATE:
        return True
    message = str(orig).lower()
    return "unique" in message or "duplicate key" in message


async def _flush_or_raise(session: AsyncSession, conflict_message: str, details: dict[str, Any]) -> None:
    """Flush pending writes, classifying integrity failures.

    Raises:
        ConflictError: On a unique-constraint violation.
        InternalError: On any other integrity failure.
    """
    try:
        await session.flush()
    except IntegrityError as e:
        await session.rollback()
        if is_unique_violation(e):
            raise ConflictError(conflict_message, details=details) from e
        logger.error("Integrity error on flush", error=str(e.orig), **details)
        raise InternalError("Failed to save record", details=details) from e


# ============================================================================
# Products
# ============================================================================


class ProductRepository:
    """Repository for Product database operations.

    Handles all database interactions for products including
    filtering, sorting, and pagination.

    Example usage:
        async with get_session_factory()() as session:
            repo = ProductRepository(session)
            products = await repo.find_all(
                category="Weight Management",
                max_price=500,
                sort=ProductSort.PRICE_LOW_HIGH,
                limit=6,
            )
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    def _select(self) -> Any:
        return (
            select(Product)
            .options(selectinload(Product.sizes), selectinload(Product.category_links))
            .execution_options(populate_existing=True)
        )

    async def get_by_id(self, product_id: str) -> Product | None:
        """Get product by ID.

        Args:
            product_id: Product ID.

        Returns:
            Product if found, None otherwise.
        """
        result = await self.session.execute(self._select().where(Product.id == product_id))
        return result.scalar_one_or_none()

    async def get_by_slug(self, slug: str) -> Product | None:
        """Get product by slug.

        Args:
            slug: Product slug.

        Returns:
            Product if found, None otherwise.
        """
        result = await self.session.execute(self._select().where(Product.slug == slug))
        return result.scalar_one_or_none()

    async def get(self, identifier: str) -> Product | None:
        """Get product by ID, falling back to slug."""
        product = await self.get_by_id(identifier)
        if product is None:
            product = await self.get_by_slug(identifier)
        return product

    async def find_all(
        self,
        category: str | None = None,
        max_price: float | None = None,
        listed_only: bool = True,
        sort: ProductSort | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[Product]:
        """Find products with filtering, sorting, and pagination.

        Args:
            category: Only products filed under this exact category name.
            max_price: Maximum base price, inclusive.
            listed_only: Exclude unlisted products.
            sort: Ordering; None keeps creation order.
            limit: Maximum results, None for all.
            offset: Result offset for pagination.

        Returns:
            Sequence of matching products.
        """
        query = self._select()

        conditions = self._conditions(category, max_price, listed_only)
        if conditions:
            query = query.where(and_(*conditions))

        query = query.order_by(*self._ordering(sort))

        if limit is not None:
            query = query.limit(limit)
        if offset:
            query = query.offset(offset)

        result = await self.session.execute(query)
        return result.scalars().all()

    async def count(
        self,
        category: str | None = None,
        max_price: float | None = None,
        listed_only: bool = True,
    ) -> int:
        """Count products matching filters.

        Args:
            category: Category filter.
            max_price: Maximum base price.
            listed_only: Exclude unlisted products.

        Returns:
            Count of matching products.
        """
        query = select(func.count(Product.id))

        conditions = self._conditions(category, max_price, listed_only)
        if conditions:
            query = query.where(and_(*conditions))

        result = await self.session.execute(query)
        return result.scalar_one()

    async def create(self, draft: ProductDraft) -> Product:
        """Insert a new product.

        Args:
            draft: Validated product fields.

        Returns:
            The persisted product.

        Raises:
            ConflictError: If the slug is already taken.
        """
        product = Product()
        self._apply(product, draft)
        self.session.add(product)
        await _flush_or_raise(
            self.session,
            f"Product with slug '{draft.slug}' already exists",
            {"slug": draft.slug},
        )
        return product

    async def replace(self, product_id: str, draft: ProductDraft) -> Product | None:
        """Replace every field of an existing product.

        Args:
            product_id: Product ID.
            draft: Validated product fields.

        Returns:
            The updated product, None if the ID does not exist.

        Raises:
            ConflictError: If the new slug belongs to another product.
        """
        product = await self.get_by_id(product_id)
        if product is None:
            return None

        self._apply(product, draft)
        # Child-only changes don't emit an UPDATE, so bump explicitly
        product.updated_at = datetime.now(timezone.utc)
        await _flush_or_raise(
            self.session,
            f"Product with slug '{draft.slug}' already exists",
            {"slug": draft.slug, "id": product_id},
        )
        return product

    async def delete(self, product_id: str) -> bool:
        """Delete a product and its size/category rows.

        Args:
            product_id: Product ID.

        Returns:
            True if a product was deleted.
        """
        product = await self.get_by_id(product_id)
        if product is None:
            return False

        await self.session.delete(product)
        await self.session.flush()
        return True

    def _apply(self, product: Product, draft: ProductDraft) -> None:
        product.name = draft.name
        product.slug = draft.slug
        product.description = draft.description
        product.price = draft.price
        product.old_price = draft.old_price
        product.images = [image.to_dict() for image in draft.images]
        product.colors = list(draft.colors)
        product.is_best_seller = draft.is_best_seller
        product.is_most_popular = draft.is_most_popular
        product.is_listed = draft.is_listed
        product.sizes = [
            ProductSize(
                position=position,
                label=size.label,
                price=size.price,
                old_price=size.old_price,
                image=size.image.to_dict() if size.image else None,
            )
            for position, size in enumerate(draft.sizes)
        ]
        product.category_links = [
            ProductCategory(position=position, name=name)
            for position, name in enumerate(draft.categories)
        ]

    def _conditions(
        self,
        category: str | None,
        max_price: float | None,
        listed_only: bool,
    ) -> list[Any]:
        conditions = []

        if listed_only:
            conditions.append(Product.is_listed.is_(True))

        if category is not None:
            conditions.append(
                Product.id.in_(
                    select(ProductCategory.product_id).where(ProductCategory.name == category)
                )
            )

        if max_price is not None:
            conditions.append(Product.price <= max_price)

        return conditions

    def _ordering(self, sort: ProductSort | None) -> list[Any]:
        """Get ORDER BY clauses for a sort key.

        Args:
            sort: Sort key.

        Returns:
            Clauses ending with the ID so pages stay stable.
        """
        columns = {
            ProductSort.PRICE_LOW_HIGH: Product.price.asc(),
            ProductSort.PRICE_HIGH_LOW: Product.price.desc(),
            ProductSort.ALPHABETICAL_AZ: Product.name.asc(),
            ProductSort.ALPHABETICAL_ZA: Product.name.desc(),
            ProductSort.BEST_SELLER: Product.created_at.desc(),
        }
        primary = columns[sort] if sort is not None else Product.created_at.asc()
        return [primary, Product.id.asc()]


# ============================================================================
# Categories
# ============================================================================


class CategoryRepository:
    """Repository for Category database operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_all(self) -> Sequence[Category]:
        """List categories by name."""
        result = await self.session.execute(
            select(Category).order_by(Category.name.asc(), Category.id.asc())
        )
        return result.scalars().all()

    async def get_by_id(self, category_id: str) -> Category | None:
        """Get category by ID."""
        return await self.session.get(Category, category_id)

    async def create(self, name: str) -> Category:
        """Insert a category.

        Raises:
            ConflictError: If the name is already taken.
        """
        category = Category(name=name)
        self.session.add(category)
        await _flush_or_raise(self.session, "Category already exists", {"name": name})
        return category

    async def delete(self, category_id: str) -> bool:
        """Delete a category. Products filed under its name are untouched."""
        category = await self.get_by_id(category_id)
        if category is None:
            return False

        await self.session.delete(category)
        await self.session.flush()
        return True


# ============================================================================
# Banners
# ============================================================================


class BannerRepository:
    """Repository for Banner database operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_all(self) -> Sequence[Banner]:
        """List banners in slider order."""
        result = await self.session.execute(
            select(Banner).order_by(Banner.display_order.asc(), Banner.id.asc())
        )
        return result.scalars().all()

    async def get_by_id(self, banner_id: str) -> Banner | None:
        """Get banner by ID."""
        return await self.session.get(Banner, banner_id)

    async def create(self, draft: BannerDraft) -> Banner:
        """Insert a banner."""
        banner = Banner(
            image=draft.image.to_dict(),
            link=draft.link,
            display_order=draft.order,
        )
        self.session.add(banner)
        await _flush_or_raise(self.session, "Banner already exists", {"link": draft.link})
        return banner

    async def delete(self, banner_id: str) -> bool:
        """Delete a banner record. Its asset is not touched here."""
        banner = await self.get_by_id(banner_id)
        if banner is None:
            return False

        await self.session.delete(banner)
        await self.session.flush()
        return True
