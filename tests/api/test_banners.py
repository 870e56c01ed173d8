"""Tests for banner API endpoints."""

from unittest.mock import AsyncMock, MagicMock

from fastapi.testclient import TestClient

from storefront.domain.exceptions import UploadError

IMAGE = {"url": "https://cdn.test/banner.webp", "public_id": "storefront_uploads/banner"}


class TestBanners:
    """Tests for /banners."""

    def test_create_defaults(self, client: TestClient) -> None:
        """Banners without a link point at the shop."""
        response = client.post("/banners", json={"image": IMAGE})
        assert response.status_code == 201
        banner = response.json()["banner"]
        assert banner["link"] == "/shop"
        assert banner["order"] == 0
        assert banner["image"] == IMAGE

    def test_listed_in_order(self, client: TestClient) -> None:
        client.post("/banners", json={"image": IMAGE, "link": "/sale", "order": 2})
        client.post("/banners", json={"image": IMAGE, "link": "/new", "order": "1"})

        banners = client.get("/banners").json()["banners"]
        assert [b["link"] for b in banners] == ["/new", "/sale"]

    def test_image_required(self, client: TestClient) -> None:
        response = client.post("/banners", json={"link": "/sale"})
        assert response.status_code == 400
        assert response.json()["details"]["field"] == "image"

    def test_delete_purges_image(self, client: TestClient, asset_store: MagicMock) -> None:
        banner = client.post("/banners", json={"image": IMAGE}).json()["banner"]

        response = client.request("DELETE", "/banners", json={"id": banner["id"]})
        assert response.status_code == 200
        asset_store.delete.assert_awaited_once_with("storefront_uploads/banner")
        assert client.get("/banners").json()["banners"] == []

    def test_delete_when_asset_store_fails(self, client: TestClient, asset_store: MagicMock) -> None:
        """The record is removed even if the image cannot be."""
        banner = client.post("/banners", json={"image": IMAGE}).json()["banner"]
        asset_store.delete = AsyncMock(side_effect=UploadError("host down"))

        response = client.request("DELETE", "/banners", json={"id": banner["id"]})
        assert response.status_code == 200
        assert client.get("/banners").json()["banners"] == []

    def test_delete_unknown(self, client: TestClient) -> None:
        response = client.request("DELETE", "/banners", json={"id": "missing"})
        assert response.status_code == 404
