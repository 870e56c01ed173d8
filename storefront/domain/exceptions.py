"""Catalog exceptions.

All errors raised by the catalog services. The API layer maps each
class to an HTTP status and a ``{success: false, error}`` payload.
"""

from typing import Any


class CatalogError(Exception):
    """Base class for all catalog exceptions.

    All catalog errors inherit from this class so the API layer can
    translate them in a single exception handler.
    """

    error_code = "CATALOG_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize catalog error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class BadRequestError(CatalogError):
    """Raised when a required field is missing or invalid."""

    error_code = "BAD_REQUEST"

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize bad request error.

        Args:
            message: Explanation of what is wrong with the input.
            field: Name of the offending field, if any.
        """
        super().__init__(message, details={"field": field} if field else None)
        self.field = field


class ConflictError(CatalogError):
    """Raised when a unique constraint would be violated."""

    error_code = "CONFLICT"


class NotFoundError(CatalogError):
    """Raised when an identifier does not resolve to a record."""

    error_code = "NOT_FOUND"

    def __init__(self, entity_type: str, identifier: str) -> None:
        """Initialize not found error.

        Args:
            entity_type: Type of entity (e.g., "Product", "Banner").
            identifier: The identifier that was looked up.
        """
        super().__init__(
            f"{entity_type} not found",
            details={"entity_type": entity_type, "id": identifier},
        )
        self.entity_type = entity_type
        self.identifier = identifier


class UploadError(CatalogError):
    """Raised when the asset store or the image transform fails."""

    error_code = "UPLOAD_ERROR"


class InternalError(CatalogError):
    """Raised on an unexpected store failure."""

    error_code = "INTERNAL_ERROR"
