"""
Application Configuration

Settings class using pydantic-settings for environment variable loading.
Defines public URLs, storage roots and cache limits.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    For example, WEBSERVER_URL can be set via the WEBSERVER_URL env var.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    app_name: str = Field(default="videofiles", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")
    version: str = Field(default="0.1.0", description="Package version")
    log_level: str = Field(default="INFO", description="Root log level")

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./videofiles.db",
        description="Database connection URL",
    )

    # Public URLs
    webserver_url: str = Field(
        default="http://localhost:9000",
        description="Public base URL of this instance, without trailing slash",
    )
    remote_scheme: str = Field(
        default="https",
        description="Scheme used when building URLs on remote instances",
    )

    # Storage
    storage_path: str = Field(
        default="/data",
        alias="STORAGE_PATH",
        description="Root path for file storage",
    )

    # Object storage
    object_storage_videos_base_url: Optional[str] = Field(
        default=None,
        description="Public base URL replacing the bucket origin of web video files",
    )
    object_storage_streaming_playlists_base_url: Optional[str] = Field(
        default=None,
        description="Public base URL replacing the bucket origin of HLS files",
    )

    # Info hash existence cache
    info_hash_cache_max_size: int = Field(
        default=200,
        description="Maximum number of memoized info hash lookups",
    )
    info_hash_cache_ttl_seconds: float = Field(
        default=12 * 3600,  # 12 hours
        description="Lifetime of a memoized info hash lookup in seconds",
    )

    @property
    def torrents_dir(self) -> Path:
        """Directory holding the torrent files of local video files."""
        return Path(self.storage_path) / "torrents"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings instance.

    Uses lru_cache to ensure settings are only loaded once per process.

    Returns:
        Settings: Application settings instance

    Example:
        >>> settings = get_settings()
        >>> print(settings.info_hash_cache_max_size)
        200
    """
    return Settings()
