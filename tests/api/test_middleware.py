"""Tests for API middleware."""

import pytest
from fastapi.testclient import TestClient

from storefront.infrastructure.config import settings


class TestRequestIdMiddleware:
    """Tests for request ID correlation middleware."""

    def test_generates_request_id_if_not_provided(self, client: TestClient) -> None:
        """Should generate request ID if not in request headers."""
        response = client.get("/health")
        assert response.status_code == 200
        # UUID format
        assert len(response.headers["X-Request-ID"]) == 36

    def test_uses_provided_request_id(self, client: TestClient) -> None:
        """Should use request ID from request headers."""
        custom_id = "custom-request-id-12345"
        response = client.get("/health", headers={"X-Request-ID": custom_id})
        assert response.headers["X-Request-ID"] == custom_id

    def test_error_envelope_carries_request_id(self, client: TestClient) -> None:
        response = client.get("/products/missing", headers={"X-Request-ID": "req-1"})
        assert response.status_code == 404
        assert response.json()["request_id"] == "req-1"


class TestAdminKeyMiddleware:
    """Tests for admin API key authentication."""

    @pytest.fixture(autouse=True)
    def admin_key(self, monkeypatch) -> None:
        monkeypatch.setattr(settings, "admin_api_key", "admin-secret")

    def test_public_endpoints_dont_require_auth(self, client: TestClient) -> None:
        assert client.get("/health").status_code == 200
        assert client.get("/products").status_code == 200
        assert client.get("/categories").status_code == 200
        assert client.get("/banners").status_code == 200

    def test_writes_require_auth(self, client: TestClient) -> None:
        response = client.post("/categories", json={"name": "Immunity"})
        assert response.status_code == 401
        assert response.json()["error_code"] == "UNAUTHORIZED"

    def test_admin_listing_requires_auth(self, client: TestClient) -> None:
        response = client.get("/products", params={"admin": "true"})
        assert response.status_code == 401

    def test_invalid_auth_format_rejected(self, client: TestClient) -> None:
        response = client.post(
            "/categories",
            json={"name": "Immunity"},
            headers={"Authorization": "InvalidFormat"},
        )
        assert response.status_code == 401
        assert response.json()["error_code"] == "UNAUTHORIZED"

    def test_invalid_api_key_rejected(self, client: TestClient) -> None:
        response = client.post(
            "/categories",
            json={"name": "Immunity"},
            headers={"Authorization": "Bearer wrong"},
        )
        assert response.status_code == 401
        assert response.json()["error_code"] == "INVALID_API_KEY"

    def test_valid_api_key_accepted(self, client: TestClient) -> None:
        response = client.post(
            "/categories",
            json={"name": "Immunity"},
            headers={"Authorization": "Bearer admin-secret"},
        )
        assert response.status_code == 201
