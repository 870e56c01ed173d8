"""Shared test fixtures.

Every test gets its own SQLite database file and fresh engine/client
singletons.
"""

from collections.abc import AsyncGenerator, Callable, Generator
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession

import storefront.infrastructure.asset_store as asset_store_module
import storefront.infrastructure.database as database_module
from storefront.infrastructure.asset_store import AssetStoreClient, UploadedAsset, get_asset_store
from storefront.infrastructure.config import settings


@pytest.fixture(autouse=True)
def reset_stores(tmp_path, monkeypatch) -> Generator[None, None, None]:
    """Point the app at a throwaway database and reset global singletons."""
    monkeypatch.setattr(settings, "database_url", f"sqlite+aiosqlite:///{tmp_path}/test.db")
    monkeypatch.setattr(settings, "admin_api_key", None)
    monkeypatch.setattr(settings, "purge_product_assets", True)
    database_module._engine = None
    database_module._session_factory = None
    asset_store_module._asset_store = None
    yield
    database_module._engine = None
    database_module._session_factory = None
    asset_store_module._asset_store = None


@pytest.fixture
def asset_store() -> MagicMock:
    """Asset store double that uploads and deletes successfully."""
    store = MagicMock(spec=AssetStoreClient)
    counter = {"n": 0}

    async def upload(data: bytes) -> UploadedAsset:
        counter["n"] += 1
        public_id = f"storefront_uploads/img{counter['n']}"
        return UploadedAsset(url=f"https://cdn.test/{public_id}.webp", public_id=public_id)

    store.upload = AsyncMock(side_effect=upload)
    store.delete = AsyncMock(return_value=True)
    return store


@pytest.fixture
def client(asset_store: MagicMock) -> Generator[TestClient, None, None]:
    """Create test client backed by the per-test database."""
    from storefront.main import app

    app.dependency_overrides[get_asset_store] = lambda: asset_store
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def session() -> AsyncGenerator[AsyncSession, None]:
    """Create a database session with the catalog schema in place."""
    await database_module.init_models()
    async with database_module.get_session_factory()() as session:
        yield session
    await database_module.dispose_engine()


@pytest.fixture
def product_payload() -> Callable[..., dict[str, Any]]:
    """Factory for valid product submissions."""

    def build(**overrides: Any) -> dict[str, Any]:
        slug = overrides.get("slug", "green-tea")
        payload: dict[str, Any] = {
            "name": "Green Tea",
            "slug": slug,
            "description": "Loose leaf green tea",
            "price": 299,
            "images": [{"url": f"https://cdn.test/{slug}.webp", "public_id": f"storefront_uploads/{slug}"}],
            "categories": ["Weight Management"],
        }
        payload.update(overrides)
        return payload

    return build
