"""Typed drafts for catalog writes.

Admin submissions arrive as loosely typed JSON (numbers as text, blank
strings for cleared fields). Every write is parsed into one of the
drafts below before any store call, so repositories only ever see
validated values.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from storefront.domain.exceptions import BadRequestError

TRUE_STRINGS = {"true", "1", "yes", "on"}
FALSE_STRINGS = {"false", "0", "no", "off", ""}

# Prices and banner order are stored as NUMERIC(12, 2)
AMOUNT_LIMIT = 10**10


# ============================================================================
# Drafts
# ============================================================================


@dataclass(frozen=True)
class ImageRef:
    """Reference to an image hosted on the asset store."""

    url: str
    public_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the embedded document shape."""
        return {"url": self.url, "public_id": self.public_id}


@dataclass(frozen=True)
class SizeVariant:
    """Size option with its own pricing."""

    label: str
    price: float | None = None
    old_price: float | None = None
    image: ImageRef | None = None


@dataclass
class ProductDraft:
    """Validated product fields, ready to persist."""

    name: str
    slug: str
    price: float
    images: list[ImageRef]
    description: str | None = None
    old_price: float | None = None
    sizes: list[SizeVariant] = field(default_factory=list)
    colors: list[str] = field(default_factory=list)
    categories: list[str] = field(default_factory=list)
    is_best_seller: bool = False
    is_most_popular: bool = False
    is_listed: bool = True


@dataclass
class BannerDraft:
    """Validated banner fields, ready to persist."""

    image: ImageRef
    link: str
    order: float = 0


# ============================================================================
# Coercion helpers
# ============================================================================


def coerce_number(value: Any, field_name: str) -> float | None:
    """Coerce a numeric field that may arrive as text.

    Args:
        value: Raw value.
        field_name: Field name used in error messages.

    Returns:
        The number, or None when the field is absent or blank.

    Raises:
        BadRequestError: If the value is not numeric.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise BadRequestError(f"{field_name} must be a number", field=field_name)
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise BadRequestError(f"{field_name} must be a number", field=field_name)
    if not math.isfinite(number):
        raise BadRequestError(f"{field_name} must be a finite number", field=field_name)
    return number


def coerce_amount(value: Any, field_name: str) -> float | None:
    """Coerce a stored amount (price or order) and check it fits its column.

    Raises:
        BadRequestError: If the value is not numeric or out of range.
    """
    number = coerce_number(value, field_name)
    if number is not None and abs(round(number, 2)) >= AMOUNT_LIMIT:
        raise BadRequestError(
            f"{field_name} must be less than {AMOUNT_LIMIT:,} in magnitude",
            field=field_name,
        )
    return number


def coerce_flag(value: Any, field_name: str, default: bool) -> bool:
    """Coerce a boolean field that may arrive as text."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in TRUE_STRINGS:
        return True
    if text in FALSE_STRINGS:
        return False
    raise BadRequestError(f"{field_name} must be a boolean", field=field_name)


def clean_text(value: Any) -> str | None:
    """Strip a text field, mapping blank to None."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def clean_labels(value: Any, field_name: str) -> list[str]:
    """Normalize a list of free-text labels.

    A bare string is treated as a single label. Blank entries are
    dropped and duplicates collapse to their first occurrence.
    """
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        raise BadRequestError(f"{field_name} must be a list", field=field_name)

    labels: list[str] = []
    for item in value:
        label = clean_text(item)
        if label and label not in labels:
            labels.append(label)
    return labels


def parse_image(value: Any, field_name: str) -> ImageRef | None:
    """Parse an image reference.

    Accepts ``{"url", "public_id"}`` mappings (``publicId`` too) or a
    bare URL string.

    Returns:
        The reference, or None when no URL is present.
    """
    if value is None:
        return None
    if isinstance(value, str):
        url = value.strip()
        return ImageRef(url=url) if url else None
    if not isinstance(value, Mapping):
        raise BadRequestError(f"{field_name} must be an image object", field=field_name)

    url = clean_text(value.get("url"))
    if not url:
        return None
    public_id = clean_text(value.get("public_id") or value.get("publicId"))
    return ImageRef(url=url, public_id=public_id)


def parse_images(value: Any) -> list[ImageRef]:
    """Parse the ordered image list of a product."""
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        value = [value]
    images = [parse_image(item, "images") for item in value]
    return [image for image in images if image is not None]


def parse_sizes(value: Any) -> list[SizeVariant]:
    """Parse size variants.

    Entries may be mappings or bare label strings. Entries with a blank
    label are dropped.
    """
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise BadRequestError("sizes must be a list", field="sizes")

    sizes: list[SizeVariant] = []
    for item in value:
        if isinstance(item, str):
            label = clean_text(item)
            if label:
                sizes.append(SizeVariant(label=label))
            continue
        if not isinstance(item, Mapping):
            raise BadRequestError("sizes entries must be objects", field="sizes")

        label = clean_text(item.get("label"))
        if not label:
            continue
        sizes.append(
            SizeVariant(
                label=label,
                price=coerce_amount(item.get("price"), "sizes.price"),
                old_price=coerce_amount(
                    _first_present(item, "old_price", "oldPrice"), "sizes.oldPrice"
                ),
                image=parse_image(item.get("image"), "sizes.image"),
            )
        )
    return sizes


def _first_present(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


# ============================================================================
# Entry points
# ============================================================================


def parse_product_draft(data: Mapping[str, Any]) -> ProductDraft:
    """Validate a product submission.

    Args:
        data: Raw payload with snake_case or camelCase keys.

    Returns:
        Validated draft.

    Raises:
        BadRequestError: If no image is attached, or name, slug or
            price are missing or invalid.
    """
    images = parse_images(data.get("images"))
    if not images:
        raise BadRequestError("At least one image is required", field="images")

    name = clean_text(data.get("name"))
    if not name:
        raise BadRequestError("Product name is required", field="name")

    slug = clean_text(data.get("slug"))
    if not slug:
        raise BadRequestError("Product slug is required", field="slug")

    price = coerce_amount(data.get("price"), "price")
    if price is None:
        raise BadRequestError("price is required", field="price")

    return ProductDraft(
        name=name,
        slug=slug,
        price=price,
        images=images,
        description=clean_text(data.get("description")),
        old_price=coerce_amount(_first_present(data, "old_price", "oldPrice"), "oldPrice"),
        sizes=parse_sizes(data.get("sizes")),
        colors=clean_labels(data.get("colors"), "colors"),
        categories=clean_labels(_first_present(data, "categories", "category"), "category"),
        is_best_seller=coerce_flag(
            _first_present(data, "is_best_seller", "isBestSeller"), "isBestSeller", False
        ),
        is_most_popular=coerce_flag(
            _first_present(data, "is_most_popular", "isMostPopular"), "isMostPopular", False
        ),
        is_listed=coerce_flag(_first_present(data, "is_listed", "isListed"), "isListed", True),
    )


def parse_banner_draft(data: Mapping[str, Any], default_link: str) -> BannerDraft:
    """Validate a banner submission.

    Args:
        data: Raw payload.
        default_link: Link used when none is given.

    Returns:
        Validated draft.

    Raises:
        BadRequestError: If the image is missing or the order is not numeric.
    """
    image = parse_image(data.get("image"), "image")
    if image is None:
        raise BadRequestError("Banner image is required", field="image")

    order = coerce_amount(data.get("order"), "order")
    return BannerDraft(
        image=image,
        link=clean_text(data.get("link")) or default_link,
        order=order if order is not None else 0,
    )


def parse_category_name(value: Any) -> str:
    """Validate a category name.

    Raises:
        BadRequestError: If the trimmed name is empty.
    """
    name = clean_text(value) if isinstance(value, str) else None
    if not name:
        raise BadRequestError("Category name is required", field="name")
    return name


def parse_identifier(value: Any, field_name: str = "id") -> str:
    """Validate an entity identifier from a request body.

    Raises:
        BadRequestError: If the identifier is missing or blank.
    """
    identifier = clean_text(value) if isinstance(value, (str, int)) else None
    if not identifier:
        raise BadRequestError("Provide id", field=field_name)
    return identifier
