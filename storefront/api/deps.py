"""FastAPI dependencies shared by the routers."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.catalog.service import BannerService, CatalogService, CategoryService
from storefront.infrastructure.asset_store import AssetStoreClient, get_asset_store
from storefront.infrastructure.database import get_session

SessionDep = Annotated[AsyncSession, Depends(get_session)]
AssetStoreDep = Annotated[AssetStoreClient, Depends(get_asset_store)]


def get_catalog_service(session: SessionDep, asset_store: AssetStoreDep) -> CatalogService:
    """Get product service for the request session."""
    return CatalogService(session, asset_store)


def get_category_service(session: SessionDep) -> CategoryService:
    """Get category service for the request session."""
    return CategoryService(session)


def get_banner_service(session: SessionDep, asset_store: AssetStoreDep) -> BannerService:
    """Get banner service for the request session."""
    return BannerService(session, asset_store)
