"""Sample catalog data for local development.

Seeds a handful of categories, listed products and one banner so the
shop has something to render against a fresh database.
"""

from typing import Any

import structlog
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.catalog.models import Banner, Category, Product, ProductCategory, ProductSize
from storefront.catalog.payloads import parse_banner_draft, parse_product_draft
from storefront.catalog.repository import BannerRepository, CategoryRepository, ProductRepository
from storefront.domain.exceptions import ConflictError

logger = structlog.get_logger()

PLACEHOLDER_IMAGE = "https://placehold.co/800x800.webp"

SAMPLE_CATEGORIES = [
    "Weight Management",
    "Immunity",
    "Skin Care",
    "Hair Care",
]

SAMPLE_PRODUCTS: list[dict[str, Any]] = [
    {
        "name": "Green Tea Fat Burner",
        "slug": "green-tea-fat-burner",
        "description": "Herbal blend for metabolism support.",
        "price": 499,
        "old_price": 699,
        "categories": ["Weight Management"],
        "sizes": [
            {"label": "60 capsules", "price": 499},
            {"label": "120 capsules", "price": 899, "old_price": 1199},
        ],
        "is_best_seller": True,
    },
    {
        "name": "Apple Cider Vinegar",
        "slug": "apple-cider-vinegar",
        "description": "Raw, unfiltered, with the mother.",
        "price": 349,
        "categories": ["Weight Management", "Immunity"],
        "is_most_popular": True,
    },
    {
        "name": "Vitamin C Effervescent",
        "slug": "vitamin-c-effervescent",
        "description": "1000 mg daily immunity support.",
        "price": 299,
        "categories": ["Immunity"],
    },
    {
        "name": "Aloe Vera Gel",
        "slug": "aloe-vera-gel",
        "description": "Soothing gel for face and body.",
        "price": 249,
        "old_price": 299,
        "categories": ["Skin Care"],
        "colors": ["Green"],
    },
    {
        "name": "Onion Hair Oil",
        "slug": "onion-hair-oil",
        "description": "Cold-pressed oil for hair fall control.",
        "price": 399,
        "categories": ["Hair Care"],
    },
]

SAMPLE_BANNERS: list[dict[str, Any]] = [
    {"image": {"url": "https://placehold.co/1600x500.webp"}, "order": 0},
]


async def clear_catalog(session: AsyncSession) -> None:
    """Delete every catalog record. Hosted assets are left alone."""
    for model in (ProductSize, ProductCategory, Product, Category, Banner):
        await session.execute(delete(model))
    await session.flush()


async def seed_catalog(session: AsyncSession, clear: bool = False) -> dict[str, Any]:
    """Seed the sample catalog.

    Records that already exist (same slug or category name) are skipped,
    so the seed can be run repeatedly.

    Args:
        session: Async SQLAlchemy session.
        clear: Whether to delete existing records first.

    Returns:
        Seeding result with counts.
    """
    if clear:
        await clear_catalog(session)
        await session.commit()

    categories = CategoryRepository(session)
    products = ProductRepository(session)
    banners = BannerRepository(session)

    created = {"categories": 0, "products": 0, "banners": 0}

    for name in SAMPLE_CATEGORIES:
        try:
            await categories.create(name)
            await session.commit()
            created["categories"] += 1
        except ConflictError:
            logger.info("Category already seeded", name=name)

    for data in SAMPLE_PRODUCTS:
        draft = parse_product_draft({"images": [{"url": PLACEHOLDER_IMAGE}], **data})
        try:
            await products.create(draft)
            await session.commit()
            created["products"] += 1
        except ConflictError:
            logger.info("Product already seeded", slug=draft.slug)

    if clear or not await banners.find_all():
        for data in SAMPLE_BANNERS:
            await banners.create(parse_banner_draft(data, default_link="/shop"))
            created["banners"] += 1
        await session.commit()

    logger.info("Catalog seeded", cleared=clear, **created)
    return {"cleared": clear, **created}
