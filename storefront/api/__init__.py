"""API layer module.

Contains FastAPI routers and request/response schemas.
"""

from storefront.api.banners import router as banners_router
from storefront.api.categories import router as categories_router
from storefront.api.health import router as health_router
from storefront.api.products import router as products_router
from storefront.api.upload import router as upload_router

__all__ = [
    "banners_router",
    "categories_router",
    "health_router",
    "products_router",
    "upload_router",
]
