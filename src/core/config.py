"""Application configuration management using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Allowance for multipart boundaries and part headers on top of file bytes
MULTIPART_OVERHEAD_BYTES = 64 * 1024


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="storefront-admin", description="Application name")
    app_env: str = Field(default="development", description="Environment (development/staging/production)")
    debug: bool = Field(default=False, description="Enable debug mode")

    # Server
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8080, description="Server port")

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        description="Comma-separated list of allowed CORS origins",
    )

    # Remote catalog store
    catalog_api_url: str = Field(
        default="http://localhost:4000",
        description="Base URL of the remote product/category/color store",
    )
    catalog_api_timeout: float = Field(default=10.0, gt=0, description="Remote store request timeout in seconds")
    catalog_refresh_on_startup: bool = Field(
        default=True,
        description="Load products, categories and colors when the service starts",
    )

    # Admin product manager
    items_per_page: int = Field(default=4, ge=1, description="Products per admin page")
    max_page_links: int = Field(default=5, ge=1, description="Max page number links shown in navigation")
    max_upload_size_bytes: int = Field(
        default=10 * 1024 * 1024,
        ge=1,
        description="Maximum size of a single pending image upload",
    )
    max_upload_files: int = Field(default=10, ge=1, description="Maximum number of images in one upload request")

    # Storefront
    featured_products_limit: int = Field(default=4, ge=1, description="Number of featured products on the home page")
    related_products_limit: int = Field(default=4, ge=1, description="Number of related products on a detail page")
    public_assets_prefix: str = Field(default="/assets", description="Path prefix for bundled static images")
    product_placeholder_image: str = Field(
        default="/assets/product-placeholder.jpg",
        description="Image shown when a product has no usable image",
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins string into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def max_request_body_size(self) -> int:
        """Largest accepted request body: a full upload batch plus multipart framing."""
        return self.max_upload_size_bytes * self.max_upload_files + MULTIPART_OVERHEAD_BYTES

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton.

    Returns:
        Settings: Application settings instance.

    Note:
        Settings are cached using lru_cache for performance.
        Call get_settings.cache_clear() to reload settings.
    """
    return Settings()
