"""Product Catalog Service.

Provides persistence, listing queries and admin operations for
products, categories and banners.
"""

from storefront.catalog.listing import ListingQuery, PaginatedResult, ProductSort
from storefront.catalog.models import Banner, Category, Product, ProductCategory, ProductSize
from storefront.catalog.payloads import BannerDraft, ImageRef, ProductDraft, SizeVariant
from storefront.catalog.repository import BannerRepository, CategoryRepository, ProductRepository
from storefront.catalog.service import BannerService, CatalogService, CategoryService

__all__ = [
    # Models
    "Banner",
    "Category",
    "Product",
    "ProductCategory",
    "ProductSize",
    # Drafts
    "BannerDraft",
    "ImageRef",
    "ProductDraft",
    "SizeVariant",
    # Listing
    "ListingQuery",
    "PaginatedResult",
    "ProductSort",
    # Repositories
    "BannerRepository",
    "CategoryRepository",
    "ProductRepository",
    # Services
    "BannerService",
    "CatalogService",
    "CategoryService",
]
