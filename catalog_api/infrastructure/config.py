"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_version: str = "0.1.0"
    debug: bool = False

    # Database (hosted Postgres behind the backend service)
    database_url: str = "postgresql+asyncpg://catalog:catalog_dev_password@db:5432/catalog"

    # Auth service
    supabase_url: str = "http://localhost:54321"
    supabase_anon_key: str = "dev-anon-key"
    supabase_service_role_key: str = "dev-service-role-key-change-in-production"
    auth_timeout_seconds: float = 10.0

    # Admin panel authentication
    admin_api_key: str = "dev-admin-key-change-in-production"

    # Storefront
    app_url: str = "http://localhost:3000"
    default_page_size: int = 20
    currency: str = "EUR"

    # Logging
    log_level: str = "INFO"

    class Config:
        """Pydantic configuration."""

        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
