"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_version: str = "0.1.0"
    debug: bool = False

    # Database
    database_url: str = "postgresql+asyncpg://storefront:storefront_dev_password@db:5432/storefront"

    # Authentication (disabled when unset)
    admin_api_key: str | None = None

    # Catalog
    listing_page_size: int = 12
    listing_max_page_size: int = 100
    default_banner_link: str = "/shop"
    purge_product_assets: bool = True

    # Asset store (Cloudinary-compatible REST API)
    asset_store_url: str = "https://api.cloudinary.com/v1_1"
    cloudinary_cloud_name: str | None = None
    cloudinary_api_key: str | None = None
    cloudinary_api_secret: str | None = None
    cloudinary_folder: str = "storefront_uploads"
    asset_store_timeout: float = 30.0
    image_quality: int = 80

    # Logging
    log_level: str = "INFO"

    class Config:
        """Pydantic configuration."""

        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
