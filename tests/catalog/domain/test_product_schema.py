"""Validation rules of the admin product payload."""

from decimal import Decimal

import pytest
from catalog.api.schemas import CreateProductRequest
from pydantic import ValidationError


def _payload(**overrides):
    data = {
        "name": "Classic Black T-Shirt",
        "description": "Premium cotton crew-neck tee in black.",
        "price": 29.99,
        "cost": 12.5,
        "brand_id": "brand-acme",
        "sku": "TSHIRT-BLK",
        "slug": "classic-black-tshirt",
    }
    data.update(overrides)
    return data


class TestCreateProductRequest:
    def test_valid_payload(self):
        request = CreateProductRequest.model_validate(_payload())

        assert request.price == Decimal("29.99")
        assert request.cost == Decimal("12.50")
        assert request.variants == []
        assert request.images == []

    def test_amounts_round_to_cents(self):
        request = CreateProductRequest.model_validate(_payload(price="10.005", cost="3.333"))

        assert request.price == Decimal("10.01")
        assert request.cost == Decimal("3.33")

    @pytest.mark.parametrize("field", ["price", "cost"])
    @pytest.mark.parametrize("value", [0, -1])
    def test_amounts_must_be_positive(self, field, value):
        with pytest.raises(ValidationError):
            CreateProductRequest.model_validate(_payload(**{field: value}))

    def test_compare_price_must_cover_cost(self):
        with pytest.raises(ValidationError):
            CreateProductRequest.model_validate(_payload(compare_price=10.0, cost=12.5))

        request = CreateProductRequest.model_validate(_payload(compare_price=12.5, cost=12.5))
        assert request.compare_price == Decimal("12.50")

    @pytest.mark.parametrize(
        "field,value",
        [
            ("name", ""),
            ("name", "x" * 101),
            ("description", ""),
            ("description", "x" * 2001),
            ("sku", ""),
            ("sku", "x" * 51),
        ],
    )
    def test_length_limits(self, field, value):
        with pytest.raises(ValidationError):
            CreateProductRequest.model_validate(_payload(**{field: value}))

    @pytest.mark.parametrize("slug", ["Classic-Tee", "classic tee", "classic--tee", "-classic", "classic_tee", ""])
    def test_slug_must_be_lowercase_kebab(self, slug):
        with pytest.raises(ValidationError):
            CreateProductRequest.model_validate(_payload(slug=slug))

    def test_variant_stock_cannot_be_negative(self):
        variant = {"sku": "TSHIRT-BLK-M", "color_id": "black", "size_id": "m", "stock": -1}
        with pytest.raises(ValidationError):
            CreateProductRequest.model_validate(_payload(variants=[variant]))

    def test_variant_price_rounds_to_cents(self):
        variant = {"sku": "TSHIRT-BLK-M", "color_id": "black", "size_id": "m", "stock": 3, "price": "31.499"}
        request = CreateProductRequest.model_validate(_payload(variants=[variant]))
        assert request.variants[0].price == Decimal("31.50")

    def test_image_url_must_be_a_url(self):
        with pytest.raises(ValidationError):
            CreateProductRequest.model_validate(_payload(images=[{"url": "not a url"}]))

        request = CreateProductRequest.model_validate(_payload(images=[{"url": "https://img.example.com/a.png"}]))
        assert str(request.images[0].url) == "https://img.example.com/a.png"
