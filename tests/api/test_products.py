"""Tests for product API endpoints."""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient


def create(client: TestClient, payload: dict) -> dict:
    """Create a product and return its JSON."""
    response = client.post("/products", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["product"]


class TestCreateProduct:
    """Tests for POST /products."""

    def test_create(self, client: TestClient, product_payload) -> None:
        """Created products come back in camelCase."""
        response = client.post(
            "/products",
            json=product_payload(
                oldPrice="399",
                isBestSeller=True,
                sizes=[{"label": "100 g", "price": 149, "oldPrice": 199}],
                colors=["Green"],
            ),
        )
        assert response.status_code == 201
        data = response.json()
        assert data["success"] is True
        product = data["product"]
        assert product["slug"] == "green-tea"
        assert product["price"] == 299
        assert product["oldPrice"] == 399
        assert product["isBestSeller"] is True
        assert product["isListed"] is True
        assert product["images"][0]["public_id"] == "storefront_uploads/green-tea"
        assert product["sizes"][0] == {"label": "100 g", "price": 149, "oldPrice": 199, "image": None}
        assert product["categories"] == ["Weight Management"]
        assert "createdAt" in product

    def test_missing_image(self, client: TestClient, product_payload) -> None:
        response = client.post("/products", json=product_payload(images=[]))
        assert response.status_code == 400
        data = response.json()
        assert data["success"] is False
        assert data["error"] == "At least one image is required"
        assert data["error_code"] == "BAD_REQUEST"

    def test_price_out_of_range(self, client: TestClient, product_payload) -> None:
        response = client.post("/products", json=product_payload(price=1e13))
        assert response.status_code == 400
        data = response.json()
        assert data["error_code"] == "BAD_REQUEST"
        assert data["details"]["field"] == "price"

    def test_missing_price(self, client: TestClient, product_payload) -> None:
        payload = product_payload()
        del payload["price"]
        response = client.post("/products", json=payload)
        assert response.status_code == 400
        assert response.json()["details"]["field"] == "price"

    def test_duplicate_slug(self, client: TestClient, product_payload) -> None:
        first = create(client, product_payload())
        response = client.post("/products", json=product_payload(name="Second Tea"))
        assert response.status_code == 409
        assert response.json()["error_code"] == "CONFLICT"

        stored = client.get("/products/green-tea").json()["product"]
        assert stored["id"] == first["id"]
        assert stored["name"] == "Green Tea"

    def test_malformed_body(self, client: TestClient) -> None:
        response = client.post("/products", json=[1, 2])
        assert response.status_code == 400
        assert response.json()["error_code"] == "BAD_REQUEST"


class TestListProducts:
    """Tests for GET /products."""

    def test_pagination(self, client: TestClient, product_payload) -> None:
        """Thirteen products at six per page give a last page of one."""
        for i in range(13):
            create(client, product_payload(slug=f"tea-{i:02d}", price=100 + i))

        response = client.get("/products", params={"limit": 6, "page": 3})
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert len(data["products"]) == 1
        assert data["page"] == 3
        assert data["pages"] == 3
        assert data["total"] == 13

    def test_default_page_size(self, client: TestClient, product_payload) -> None:
        for i in range(13):
            create(client, product_payload(slug=f"tea-{i:02d}"))

        data = client.get("/products").json()
        assert len(data["products"]) == 12
        assert data["pages"] == 2

    def test_page_past_end(self, client: TestClient, product_payload) -> None:
        create(client, product_payload())
        data = client.get("/products", params={"page": 5}).json()
        assert data["products"] == []
        assert data["total"] == 1
        assert data["pages"] == 1

    def test_huge_page(self, client: TestClient, product_payload) -> None:
        """A page number beyond any offset the database takes is just empty."""
        create(client, product_payload())
        response = client.get("/products", params={"page": str(10**19), "limit": 6})
        assert response.status_code == 200
        data = response.json()
        assert data["products"] == []
        assert data["total"] == 1
        assert data["pages"] == 1

    def test_huge_limit(self, client: TestClient, product_payload) -> None:
        """Oversized limits are clamped to the largest page size."""
        for i in range(3):
            create(client, product_payload(slug=f"tea-{i}"))
        response = client.get("/products", params={"limit": str(10**19)})
        assert response.status_code == 200
        data = response.json()
        assert len(data["products"]) == 3
        assert data["pages"] == 1

    def test_category_and_max_price(self, client: TestClient, product_payload) -> None:
        create(client, product_payload(slug="cheap", price=300))
        create(client, product_payload(slug="edge", price=500))
        create(client, product_payload(slug="pricey", price=650))
        create(client, product_payload(slug="other", price=200, categories=["Immunity"]))

        data = client.get(
            "/products", params={"category": "Weight Management", "maxPrice": "500"}
        ).json()
        assert sorted(p["slug"] for p in data["products"]) == ["cheap", "edge"]
        for product in data["products"]:
            assert product["price"] <= 500
            assert "Weight Management" in product["categories"]

    @pytest.mark.parametrize(
        "sort,key,reverse",
        [
            ("priceLowHigh", "price", False),
            ("priceHighLow", "price", True),
            ("AlphabeticalAZ", "name", False),
            ("AlphabeticalZA", "name", True),
        ],
    )
    def test_sorting(self, client: TestClient, product_payload, sort: str, key: str, reverse: bool) -> None:
        for slug, name, price in [("m", "Moringa", 450), ("b", "Brahmi", 120), ("s", "Shilajit", 999)]:
            create(client, product_payload(slug=slug, name=name, price=price))

        products = client.get("/products", params={"sort": sort}).json()["products"]
        values = [p[key] for p in products]
        assert values == sorted(values, reverse=reverse)

    def test_unknown_sort_is_ignored(self, client: TestClient, product_payload) -> None:
        create(client, product_payload())
        response = client.get("/products", params={"sort": "random"})
        assert response.status_code == 200
        assert response.json()["total"] == 1

    def test_unlisted_only_in_admin(self, client: TestClient, product_payload) -> None:
        """Unlisted products are hidden from the shop."""
        create(client, product_payload(slug="listed"))
        create(client, product_payload(slug="hidden", isListed=False))

        shop = client.get("/products").json()
        assert [p["slug"] for p in shop["products"]] == ["listed"]

        admin = client.get("/products", params={"admin": "true"}).json()
        assert sorted(p["slug"] for p in admin["products"]) == ["hidden", "listed"]
        assert admin["pages"] == 1

    @pytest.mark.parametrize("params", [{"page": "0"}, {"limit": "-3"}, {"maxPrice": "lots"}])
    def test_invalid_params(self, client: TestClient, params: dict) -> None:
        response = client.get("/products", params=params)
        assert response.status_code == 400
        assert response.json()["error_code"] == "BAD_REQUEST"


class TestGetProduct:
    """Tests for GET /products/{identifier}."""

    def test_by_slug_and_id(self, client: TestClient, product_payload) -> None:
        created = create(client, product_payload())

        by_slug = client.get("/products/green-tea")
        assert by_slug.status_code == 200
        assert by_slug.json()["product"]["id"] == created["id"]

        by_id = client.get(f"/products/{created['id']}")
        assert by_id.json()["product"]["slug"] == "green-tea"

    def test_unlisted_needs_admin(self, client: TestClient, product_payload) -> None:
        create(client, product_payload(isListed=False))
        assert client.get("/products/green-tea").status_code == 404
        assert client.get("/products/green-tea", params={"admin": "true"}).status_code == 200

    def test_not_found(self, client: TestClient) -> None:
        response = client.get("/products/nope")
        assert response.status_code == 404
        assert response.json()["error"] == "Product not found"


class TestUpdateProduct:
    """Tests for PUT /products."""

    def test_replace(self, client: TestClient, product_payload) -> None:
        created = create(client, product_payload(sizes=[{"label": "S"}]))

        response = client.put(
            "/products",
            json=product_payload(id=created["id"], name="Matcha", slug="matcha", price="549", sizes=[]),
        )
        assert response.status_code == 200
        product = response.json()["product"]
        assert product["id"] == created["id"]
        assert product["name"] == "Matcha"
        assert product["slug"] == "matcha"
        assert product["price"] == 549
        assert product["sizes"] == []

    def test_missing_id(self, client: TestClient, product_payload) -> None:
        response = client.put("/products", json=product_payload())
        assert response.status_code == 400
        assert response.json()["error"] == "Provide id"

    def test_unknown_id(self, client: TestClient, product_payload) -> None:
        response = client.put("/products", json=product_payload(id="missing"))
        assert response.status_code == 404

    def test_slug_taken(self, client: TestClient, product_payload) -> None:
        create(client, product_payload(slug="first"))
        second = create(client, product_payload(slug="second"))

        response = client.put("/products", json=product_payload(id=second["id"], slug="first"))
        assert response.status_code == 409


class TestDeleteProduct:
    """Tests for DELETE /products."""

    def test_delete(self, client: TestClient, asset_store: MagicMock, product_payload) -> None:
        created = create(client, product_payload())

        response = client.request("DELETE", "/products", json={"id": created["id"]})
        assert response.status_code == 200
        assert response.json() == {"success": True}
        asset_store.delete.assert_awaited_once_with("storefront_uploads/green-tea")
        assert client.get("/products", params={"admin": "true"}).json()["total"] == 0

    def test_missing_id(self, client: TestClient) -> None:
        response = client.request("DELETE", "/products", json={})
        assert response.status_code == 400
        assert response.json()["error"] == "Provide id"

    def test_unknown_id(self, client: TestClient) -> None:
        response = client.request("DELETE", "/products", json={"id": "missing"})
        assert response.status_code == 404
