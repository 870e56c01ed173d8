"""Tests for catalog write payload parsing."""

import pytest

from storefront.catalog.payloads import (
    AMOUNT_LIMIT,
    ImageRef,
    SizeVariant,
    clean_labels,
    coerce_amount,
    coerce_flag,
    coerce_number,
    parse_banner_draft,
    parse_category_name,
    parse_identifier,
    parse_image,
    parse_product_draft,
    parse_sizes,
)
from storefront.domain.exceptions import BadRequestError

IMAGE = {"url": "https://cdn.test/a.webp", "public_id": "storefront_uploads/a"}


class TestCoerceNumber:
    """Tests for numeric coercion."""

    def test_numeric_string(self) -> None:
        """Numbers sent as text are accepted."""
        assert coerce_number("499", "price") == 499.0
        assert coerce_number(" 12.5 ", "price") == 12.5

    def test_blank_is_absent(self) -> None:
        """Blank strings and None mean the field is not set."""
        assert coerce_number(None, "price") is None
        assert coerce_number("  ", "price") is None

    @pytest.mark.parametrize("value", ["abc", True, [1], "nan", "inf"])
    def test_rejects_non_numbers(self, value) -> None:
        """Non-numeric values are bad requests."""
        with pytest.raises(BadRequestError) as exc_info:
            coerce_number(value, "price")
        assert exc_info.value.field == "price"


class TestCoerceAmount:
    """Tests for amounts stored in NUMERIC(12, 2) columns."""

    def test_largest_amount_fits(self) -> None:
        assert coerce_amount("9999999999.99", "price") == 9999999999.99
        assert coerce_amount(-9999999999.99, "order") == -9999999999.99

    @pytest.mark.parametrize("value", [AMOUNT_LIMIT, "1e13", -AMOUNT_LIMIT, 9999999999.996])
    def test_rejects_out_of_range(self, value) -> None:
        """Amounts the column cannot hold are bad requests."""
        with pytest.raises(BadRequestError) as exc_info:
            coerce_amount(value, "price")
        assert exc_info.value.field == "price"

    def test_blank_is_absent(self) -> None:
        assert coerce_amount("", "price") is None


class TestCoerceFlag:
    """Tests for boolean coercion."""

    def test_default_when_missing(self) -> None:
        assert coerce_flag(None, "isListed", True) is True
        assert coerce_flag(None, "isBestSeller", False) is False

    @pytest.mark.parametrize("value", [True, "true", "1", "yes", "ON"])
    def test_truthy(self, value) -> None:
        assert coerce_flag(value, "flag", False) is True

    @pytest.mark.parametrize("value", [False, "false", "0", "no", ""])
    def test_falsy(self, value) -> None:
        assert coerce_flag(value, "flag", True) is False

    def test_rejects_garbage(self) -> None:
        with pytest.raises(BadRequestError):
            coerce_flag("maybe", "flag", False)


class TestLabels:
    """Tests for color/category label lists."""

    def test_single_string_becomes_list(self) -> None:
        assert clean_labels("Immunity", "category") == ["Immunity"]

    def test_blanks_and_duplicates_dropped(self) -> None:
        assert clean_labels(["Red", " ", "Red", "Blue "], "colors") == ["Red", "Blue"]

    def test_rejects_mapping(self) -> None:
        with pytest.raises(BadRequestError):
            clean_labels({"a": 1}, "colors")


class TestImages:
    """Tests for image reference parsing."""

    def test_mapping(self) -> None:
        assert parse_image(IMAGE, "image") == ImageRef(
            url="https://cdn.test/a.webp", public_id="storefront_uploads/a"
        )

    def test_camel_case_public_id(self) -> None:
        ref = parse_image({"url": "https://cdn.test/b.webp", "publicId": "b"}, "image")
        assert ref is not None
        assert ref.public_id == "b"

    def test_bare_url(self) -> None:
        assert parse_image("https://cdn.test/c.webp", "image") == ImageRef(url="https://cdn.test/c.webp")

    def test_missing_url_is_none(self) -> None:
        assert parse_image({"public_id": "x"}, "image") is None
        assert parse_image("", "image") is None


class TestSizes:
    """Tests for size variant parsing."""

    def test_full_entry(self) -> None:
        sizes = parse_sizes([{"label": "500 ml", "price": "199", "oldPrice": "249", "image": IMAGE}])
        assert sizes == [
            SizeVariant(
                label="500 ml",
                price=199.0,
                old_price=249.0,
                image=ImageRef(url=IMAGE["url"], public_id=IMAGE["public_id"]),
            )
        ]

    def test_label_only_entries(self) -> None:
        sizes = parse_sizes(["S", {"label": "M"}, {"label": " "}])
        assert [s.label for s in sizes] == ["S", "M"]
        assert sizes[0].price is None

    def test_invalid_size_price(self) -> None:
        with pytest.raises(BadRequestError):
            parse_sizes([{"label": "S", "price": "cheap"}])


class TestParseProductDraft:
    """Tests for product submission validation."""

    def test_minimal_product(self) -> None:
        """A product needs name, slug, price and one image."""
        draft = parse_product_draft(
            {"name": "Tea", "slug": "tea", "price": "120", "images": [IMAGE]}
        )
        assert draft.name == "Tea"
        assert draft.price == 120.0
        assert draft.is_listed is True
        assert draft.is_best_seller is False
        assert draft.sizes == []
        assert draft.categories == []

    def test_camel_case_fields(self) -> None:
        draft = parse_product_draft(
            {
                "name": "Tea",
                "slug": "tea",
                "price": 120,
                "oldPrice": "150",
                "images": [IMAGE],
                "category": "Immunity",
                "isBestSeller": "true",
                "isListed": False,
            }
        )
        assert draft.old_price == 150.0
        assert draft.categories == ["Immunity"]
        assert draft.is_best_seller is True
        assert draft.is_listed is False

    def test_image_required_first(self) -> None:
        """Missing images are reported before other missing fields."""
        with pytest.raises(BadRequestError) as exc_info:
            parse_product_draft({})
        assert exc_info.value.message == "At least one image is required"

    def test_empty_image_list(self) -> None:
        with pytest.raises(BadRequestError) as exc_info:
            parse_product_draft({"name": "Tea", "slug": "tea", "price": 1, "images": []})
        assert exc_info.value.field == "images"

    @pytest.mark.parametrize("missing", ["name", "slug", "price"])
    def test_required_fields(self, missing: str) -> None:
        data = {"name": "Tea", "slug": "tea", "price": 10, "images": [IMAGE]}
        data[missing] = "  "
        with pytest.raises(BadRequestError) as exc_info:
            parse_product_draft(data)
        assert exc_info.value.field == missing

    def test_non_numeric_price(self) -> None:
        with pytest.raises(BadRequestError):
            parse_product_draft({"name": "Tea", "slug": "tea", "price": "ten", "images": [IMAGE]})

    @pytest.mark.parametrize(
        "overrides,field",
        [
            ({"price": 1e13}, "price"),
            ({"oldPrice": "20000000000"}, "oldPrice"),
            ({"sizes": [{"label": "XL", "price": 1e12}]}, "sizes.price"),
            ({"sizes": [{"label": "XL", "oldPrice": 1e12}]}, "sizes.oldPrice"),
        ],
    )
    def test_amounts_out_of_range(self, overrides: dict, field: str) -> None:
        data = {"name": "Tea", "slug": "tea", "price": 10, "images": [IMAGE], **overrides}
        with pytest.raises(BadRequestError) as exc_info:
            parse_product_draft(data)
        assert exc_info.value.field == field


class TestParseBannerDraft:
    """Tests for banner submission validation."""

    def test_defaults(self) -> None:
        """Link and order fall back to their defaults."""
        draft = parse_banner_draft({"image": IMAGE, "link": "  "}, default_link="/shop")
        assert draft.link == "/shop"
        assert draft.order == 0

    def test_explicit_values(self) -> None:
        draft = parse_banner_draft({"image": IMAGE, "link": "/sale", "order": "3"}, default_link="/shop")
        assert draft.link == "/sale"
        assert draft.order == 3.0

    def test_image_required(self) -> None:
        with pytest.raises(BadRequestError) as exc_info:
            parse_banner_draft({"link": "/sale"}, default_link="/shop")
        assert exc_info.value.field == "image"

    def test_order_out_of_range(self) -> None:
        with pytest.raises(BadRequestError) as exc_info:
            parse_banner_draft({"image": IMAGE, "order": "1e11"}, default_link="/shop")
        assert exc_info.value.field == "order"


class TestIdentifiers:
    """Tests for names and ids."""

    def test_category_name_trimmed(self) -> None:
        assert parse_category_name("  Immunity ") == "Immunity"

    @pytest.mark.parametrize("value", [None, "", "   ", 5])
    def test_category_name_required(self, value) -> None:
        with pytest.raises(BadRequestError) as exc_info:
            parse_category_name(value)
        assert exc_info.value.message == "Category name is required"

    def test_identifier(self) -> None:
        assert parse_identifier(" abc ") == "abc"
        assert parse_identifier(42) == "42"

    @pytest.mark.parametrize("value", [None, "", {"id": 1}])
    def test_identifier_required(self, value) -> None:
        with pytest.raises(BadRequestError) as exc_info:
            parse_identifier(value)
        assert exc_info.value.message == "Provide id"
