"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ORDERSHEET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API
    api_version: str = "0.1.0"
    debug: bool = False

    # Storage
    database_url: str = "sqlite+aiosqlite:///./ordersheet.db"
    storage_backend: str = "sql"  # "sql" or "memory"
    catalog_storage_key: str = "letra-products-storage"
    seed_sample_catalog: bool = True

    # Admin gate (shared passphrase, not a security boundary)
    admin_passphrase: str = "letra-admin"

    # Export
    order_sheet_title: str = "Letra卸事業部 注文シート"

    # Logging
    log_level: str = "INFO"
    log_json: bool = True


settings = Settings()
