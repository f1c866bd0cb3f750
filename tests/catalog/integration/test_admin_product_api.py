"""Integration tests for the admin product endpoints via TestClient."""

from decimal import Decimal

import pytest
from catalog.api.routes import admin_product_router
from fastapi import FastAPI
from fastapi.testclient import TestClient
from shared.errors import register_exception_handlers

ADMIN_ID = "user_admin"
CUSTOMER_ID = "user_customer"


@pytest.fixture()
def client(database, make_user):
    make_user(ADMIN_ID, email="admin@example.com")
    make_user(CUSTOMER_ID, email="shopper@example.com")

    app = FastAPI()
    app.include_router(admin_product_router)
    register_exception_handlers(app)
    return TestClient(app)


@pytest.fixture()
def admin(auth_headers):
    return auth_headers(ADMIN_ID)


def _product(**overrides):
    data = {
        "name": "Classic Black T-Shirt",
        "description": "Premium cotton crew-neck tee in black.",
        "price": 29.99,
        "compare_price": 39.99,
        "cost": 12.5,
        "brand_id": "brand-acme",
        "sku": "TSHIRT-BLK",
        "slug": "classic-black-tshirt",
        "variants": [
            {"sku": "TSHIRT-BLK-M", "color_id": "black", "size_id": "m", "stock": 25},
            {"sku": "TSHIRT-BLK-L", "color_id": "black", "size_id": "l", "stock": 10, "price": 31.99},
        ],
        "images": [{"url": "https://img.example.com/tshirt-black.png", "alt": "Front", "is_default": True}],
    }
    data.update(overrides)
    return data


class TestCreateProductEndpoint:
    def test_create_product(self, client, admin):
        response = client.post("/admin/products", json=_product(), headers=admin)

        assert response.status_code == 200
        data = response.json()
        assert data["id"]
        assert data["sku"] == "TSHIRT-BLK"
        assert Decimal(data["price"]) == Decimal("29.99")
        assert data["is_active"] is True
        assert {variant["sku"] for variant in data["variants"]} == {"TSHIRT-BLK-M", "TSHIRT-BLK-L"}
        assert data["images"][0]["url"] == "https://img.example.com/tshirt-black.png"

    def test_create_product_with_camel_case_fields(self, client, admin):
        payload = {
            "name": "Classic White T-Shirt",
            "description": "Premium cotton crew-neck tee in white.",
            "price": 29.99,
            "comparePrice": 39.99,
            "cost": 12.5,
            "brandId": "brand-acme",
            "sku": "TSHIRT-WHT",
            "slug": "classic-white-tshirt",
            "variants": [{"sku": "TSHIRT-WHT-M", "colorId": "white", "sizeId": "m", "stock": 5}],
            "images": [{"url": "https://img.example.com/tshirt-white.png", "isDefault": True}],
        }

        response = client.post("/admin/products", json=payload, headers=admin)

        assert response.status_code == 200
        data = response.json()
        assert data["brand_id"] == "brand-acme"
        assert Decimal(data["compare_price"]) == Decimal("39.99")
        assert data["variants"][0]["color_id"] == "white"
        assert data["images"][0]["is_default"] is True

    def test_duplicate_sku_is_409(self, client, admin):
        client.post("/admin/products", json=_product(), headers=admin)

        response = client.post(
            "/admin/products",
            json=_product(slug="another-slug", variants=[], images=[]),
            headers=admin,
        )

        assert response.status_code == 409
        assert "sku" in response.json()["details"]

    def test_invalid_payload_is_400(self, client, admin):
        response = client.post("/admin/products", json=_product(slug="Not A Slug", price=-1), headers=admin)

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "Invalid data"
        assert {tuple(error["loc"])[-1] for error in data["details"]} >= {"slug", "price"}

    def test_customer_is_403(self, client, auth_headers):
        response = client.post("/admin/products", json=_product(), headers=auth_headers(CUSTOMER_ID))
        assert response.status_code == 403

    def test_unsynced_caller_is_403(self, client, auth_headers):
        response = client.post("/admin/products", json=_product(), headers=auth_headers("user_nobody"))
        assert response.status_code == 403

    def test_admin_who_changed_email_loses_access(self, client, admin, make_user):
        make_user(ADMIN_ID, email="someone@else.com")

        response = client.post("/admin/products", json=_product(), headers=admin)

        assert response.status_code == 403

    def test_customer_who_now_holds_the_admin_email_gains_access(self, client, auth_headers, make_user):
        make_user(ADMIN_ID, email="former-admin@example.com")
        make_user(CUSTOMER_ID, email="admin@example.com")

        response = client.post("/admin/products", json=_product(), headers=auth_headers(CUSTOMER_ID))

        assert response.status_code == 200

    def test_anonymous_is_401(self, client):
        assert client.post("/admin/products", json=_product()).status_code == 401

    def test_rejected_caller_creates_nothing(self, client, auth_headers, admin):
        client.post("/admin/products", json=_product(), headers=auth_headers(CUSTOMER_ID))

        listing = client.get("/admin/products", headers=admin).json()
        assert listing["pagination"]["total"] == 0


class TestListProductsEndpoint:
    def _seed(self, client, admin):
        for index, brand in enumerate(["brand-acme", "brand-acme", "brand-other"]):
            response = client.post(
                "/admin/products",
                json=_product(
                    name=f"Product {index}",
                    sku=f"SKU-{index}",
                    slug=f"product-{index}",
                    brand_id=brand,
                    variants=[],
                    images=[],
                ),
                headers=admin,
            )
            assert response.status_code == 200

    def test_list_products(self, client, admin):
        self._seed(client, admin)

        response = client.get("/admin/products", params={"page": 1, "limit": 2}, headers=admin)

        assert response.status_code == 200
        data = response.json()
        assert len(data["products"]) == 2
        assert data["pagination"] == {"total": 3, "pages": 2, "page": 1, "limit": 2}

    def test_filters(self, client, admin):
        self._seed(client, admin)

        by_brand = client.get("/admin/products", params={"brand": "brand-other"}, headers=admin).json()
        assert [product["sku"] for product in by_brand["products"]] == ["SKU-2"]

        by_search = client.get("/admin/products", params={"search": "sku-1"}, headers=admin).json()
        assert [product["sku"] for product in by_search["products"]] == ["SKU-1"]

        inactive = client.get("/admin/products", params={"is_active": "false"}, headers=admin).json()
        assert inactive["pagination"]["total"] == 0

    def test_limit_is_capped(self, client, admin):
        response = client.get("/admin/products", params={"limit": 101}, headers=admin)
        assert response.status_code == 400

    def test_customer_is_403(self, client, auth_headers):
        assert client.get("/admin/products", headers=auth_headers(CUSTOMER_ID)).status_code == 403
