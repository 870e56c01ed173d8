"""Domain layer: catalog error taxonomy."""

from storefront.domain.exceptions import (
    BadRequestError,
    CatalogError,
    ConflictError,
    InternalError,
    NotFoundError,
    UploadError,
)

__all__ = [
    "BadRequestError",
    "CatalogError",
    "ConflictError",
    "InternalError",
    "NotFoundError",
    "UploadError",
]
