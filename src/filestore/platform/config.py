"""
Filestore Configuration Management

Uses Pydantic Settings for type-safe configuration from environment variables.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    # =========================================================================
    # APPLICATION
    # =========================================================================
    APP_NAME: str = "Filestore"
    APP_ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "info"
    VERSION: str = "0.1.0"

    # =========================================================================
    # API SERVER
    # =========================================================================
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8040
    API_PREFIX: str = "/filestore"
    CORS_ORIGINS: str = "http://localhost:3000"

    # =========================================================================
    # IPFS (Content Store)
    # =========================================================================
    IPFS_HOST: str = "http://localhost:5001"
    IPFS_TIMEOUT: float = 30.0

    # =========================================================================
    # ELASTICSEARCH (Metadata Index)
    # =========================================================================
    ELASTICSEARCH_HOST: str = "http://localhost:9200"
    ELASTICSEARCH_USERNAME: str = ""
    ELASTICSEARCH_PASSWORD: str = ""
    ELASTICSEARCH_TIMEOUT: float = 10.0

    # =========================================================================
    # INDEXING
    # =========================================================================
    # Replace None / "" field values by a sentinel so "absence" is searchable
    INDEX_NULL_VALUE: bool = True
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 1000

    # =========================================================================
    # OBSERVABILITY
    # =========================================================================
    METRICS_ENABLED: bool = True

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
