"""Shop listing query builder.

Turns the shop's query-string parameters into repository filters,
an ordering and a pagination window.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from storefront.catalog.payloads import clean_text, coerce_flag, coerce_number
from storefront.domain.exceptions import BadRequestError

T = TypeVar("T")


class ProductSort(str, Enum):
    """Sort keys understood by the shop listing."""

    PRICE_LOW_HIGH = "priceLowHigh"
    PRICE_HIGH_LOW = "priceHighLow"
    ALPHABETICAL_AZ = "AlphabeticalAZ"
    ALPHABETICAL_ZA = "AlphabeticalZA"
    BEST_SELLER = "BestSeller"

    @classmethod
    def parse(cls, value: str | None) -> "ProductSort | None":
        """Parse a sort key, ignoring unknown values.

        Args:
            value: Raw ``sort`` parameter.

        Returns:
            The sort key, or None for the default store order.
        """
        if not value:
            return None
        try:
            return cls(value.strip())
        except ValueError:
            return None


@dataclass
class ListingQuery:
    """Parsed shop listing parameters.

    Attributes:
        category: Category name the product must be filed under.
        max_price: Upper bound on the base price, inclusive.
        sort: Ordering, None for the default store order.
        page: Page number (1-indexed).
        limit: Items per page.
        admin: Include unlisted products and skip pagination.
    """

    category: str | None = None
    max_price: float | None = None
    sort: ProductSort | None = None
    page: int = 1
    limit: int = 12
    admin: bool = False

    @property
    def offset(self) -> int:
        """Calculate offset from page number."""
        return (self.page - 1) * self.limit

    @property
    def listed_only(self) -> bool:
        """Whether unlisted products are filtered out."""
        return not self.admin

    @classmethod
    def from_params(
        cls,
        category: str | None = None,
        max_price: Any = None,
        sort: str | None = None,
        page: Any = None,
        limit: Any = None,
        admin: Any = None,
        default_limit: int = 12,
        max_limit: int | None = None,
    ) -> "ListingQuery":
        """Build a query from raw query-string values.

        Args:
            category: Raw ``category`` parameter.
            max_price: Raw ``maxPrice`` parameter.
            sort: Raw ``sort`` parameter.
            page: Raw ``page`` parameter.
            limit: Raw ``limit`` parameter.
            admin: Raw ``admin`` parameter.
            default_limit: Page size when ``limit`` is absent.
            max_limit: Largest page size served; bigger limits are clamped.

        Returns:
            Parsed listing query.

        Raises:
            BadRequestError: On a non-numeric bound or a non-positive
                page or limit.
        """
        limit = _positive_int(limit, "limit", default_limit)
        if max_limit is not None:
            limit = min(limit, max_limit)

        return cls(
            category=clean_text(category),
            max_price=coerce_number(max_price, "maxPrice"),
            sort=ProductSort.parse(sort),
            page=_positive_int(page, "page", 1),
            limit=limit,
            admin=coerce_flag(admin, "admin", False),
        )


def _positive_int(value: Any, field_name: str, default: int) -> int:
    number = coerce_number(value, field_name)
    if number is None:
        return default
    if number != int(number) or number < 1:
        raise BadRequestError(f"{field_name} must be a positive integer", field=field_name)
    return int(number)


@dataclass
class PaginatedResult(Generic[T]):
    """Paginated result container.

    Attributes:
        items: List of items.
        total: Total count.
        page: Current page.
        page_size: Items per page.
    """

    items: list[T]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        """Calculate total pages."""
        if self.page_size <= 0:
            return 0
        return math.ceil(self.total / self.page_size)

    @property
    def has_next(self) -> bool:
        """Check if there's a next page."""
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        """Check if there's a previous page."""
        return self.page > 1
