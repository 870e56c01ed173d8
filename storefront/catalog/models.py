"""SQLAlchemy models for the storefront catalog.

Defines Product (with its size variants and category memberships),
Category and Banner tables. Image references are stored inline as
JSON sub-documents.
"""

from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.infrastructure.database import Base

# JSONB on PostgreSQL, plain JSON elsewhere
JSONDocument = JSON().with_variant(JSONB(), "postgresql")

Price = Numeric(12, 2, asdecimal=False)


def _new_id() -> str:
    return str(uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Product(Base):
    """Product entity in the catalog.

    Attributes:
        id: Unique product identifier (UUID).
        name: Product name.
        slug: URL-safe unique identifier.
        description: Product description.
        price: Base price.
        old_price: Optional strike-through price.
        images: Ordered list of ``{"url", "public_id"}`` references.
        colors: Color labels.
        is_best_seller: Best seller badge.
        is_most_popular: Most popular badge.
        is_listed: Whether the product shows up in the public shop.
        created_at: Creation timestamp.
        updated_at: Last update timestamp.
    """

    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[float] = mapped_column(Price, nullable=False, index=True)
    old_price: Mapped[float | None] = mapped_column(Price, nullable=True)
    images: Mapped[list[dict[str, Any]]] = mapped_column(JSONDocument, nullable=False, default=list)
    colors: Mapped[list[str]] = mapped_column(JSONDocument, nullable=False, default=list)
    is_best_seller: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_most_popular: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_listed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )

    # Relationships
    sizes: Mapped[list["ProductSize"]] = relationship(
        "ProductSize",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductSize.position",
    )
    category_links: Mapped[list["ProductCategory"]] = relationship(
        "ProductCategory",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductCategory.position",
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Product(id={self.id}, slug={self.slug})>"

    @property
    def categories(self) -> list[str]:
        """Category names in submission order."""
        return [link.name for link in self.category_links]

    @property
    def public_ids(self) -> list[str]:
        """Storage identifiers of every image the product references."""
        refs = list(self.images or [])
        refs.extend(size.image for size in self.sizes if size.image)
        return [ref["public_id"] for ref in refs if ref.get("public_id")]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary.

        Returns:
            Dictionary representation.
        """
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "description": self.description,
            "price": self.price,
            "old_price": self.old_price,
            "images": list(self.images or []),
            "sizes": [s.to_dict() for s in self.sizes],
            "colors": list(self.colors or []),
            "categories": self.categories,
            "is_best_seller": self.is_best_seller,
            "is_most_popular": self.is_most_popular,
            "is_listed": self.is_listed,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


class ProductSize(Base):
    """Size variant of a product with its own price."""

    __tablename__ = "product_sizes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    product_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    label: Mapped[str] = mapped_column(String(100), nullable=False)
    price: Mapped[float | None] = mapped_column(Price, nullable=True)
    old_price: Mapped[float | None] = mapped_column(Price, nullable=True)
    image: Mapped[dict[str, Any] | None] = mapped_column(JSONDocument, nullable=True)

    product: Mapped["Product"] = relationship("Product", back_populates="sizes")

    def __repr__(self) -> str:
        """String representation."""
        return f"<ProductSize(id={self.id}, label={self.label})>"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "label": self.label,
            "price": self.price,
            "old_price": self.old_price,
            "image": self.image,
        }


class ProductCategory(Base):
    """Category name a product is filed under.

    Plain text, deliberately not a foreign key to ``categories``.
    """

    __tablename__ = "product_categories"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    product_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)

    product: Mapped["Product"] = relationship("Product", back_populates="category_links")


class Category(Base):
    """Shop category with a unique name."""

    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Category(id={self.id}, name={self.name})>"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


class Banner(Base):
    """Promotional banner shown in the home page slider.

    Attributes:
        id: Unique banner identifier.
        image: ``{"url", "public_id"}`` reference.
        link: Click-through target.
        display_order: Slider position, ascending.
    """

    __tablename__ = "banners"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    image: Mapped[dict[str, Any]] = mapped_column(JSONDocument, nullable=False)
    link: Mapped[str] = mapped_column(String(1000), nullable=False)
    display_order: Mapped[float] = mapped_column(Price, nullable=False, default=0, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Banner(id={self.id}, order={self.display_order})>"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "image": self.image,
            "link": self.link,
            "order": self.display_order,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
