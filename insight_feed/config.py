"""
Application Configuration

Load settings from environment variables with validation.
"""

from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Environment
    environment: str = "development"
    debug: bool = True

    # Server
    port: int = 3001
    allowed_origins: str = (
        "http://localhost:5176,http://localhost:5173,"
        "http://127.0.0.1:5176,http://127.0.0.1:5173"
    )
    rate_limit_per_minute: int = 30

    # External APIs (single static credential)
    youtube_api_key: Optional[str] = Field(
        None,
        validation_alias=AliasChoices(
            "youtube_api_key", "YOUTUBE_API_KEY", "VITE_YOUTUBE_API_KEY"
        ),
    )

    # Data files (relative paths resolve against repo_dir)
    repo_dir: Path = Path(".")
    channels_file: str = "src/data/channels.json"
    videos_file: str = "src/data/videos.json"
    categories_file: Optional[str] = None

    # Fetch configuration
    default_days: int = 7
    max_results: int = 20
    request_timeout_seconds: float = 10.0
    max_retries: int = 3
    fetch_concurrency: int = 8

    # Quota Management
    youtube_daily_quota_limit: int = 9000

    # Placeholder channels when the provider rejects on quota (never in production)
    allow_mock_channels: bool = True

    # Scheduled publish
    auto_publish_enabled: bool = False
    auto_publish_cron: str = "0 */6 * * *"
    auto_publish_days: int = 7

    # Git
    git_push_remote: Optional[str] = None
    git_push_branch: Optional[str] = None
    git_timeout_seconds: float = 120.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("environment")
    @classmethod
    def _normalise_environment(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("repo_dir")
    @classmethod
    def _absolute_repo_dir(cls, value: Path) -> Path:
        # git runs with cwd=repo_dir; paths handed to it must not depend on our cwd
        return Path(value).expanduser().resolve()

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    @property
    def channels_path(self) -> Path:
        return self.repo_dir / self.channels_file

    @property
    def videos_path(self) -> Path:
        return self.repo_dir / self.videos_file

    @property
    def categories_path(self) -> Optional[Path]:
        if not self.categories_file:
            return None
        return self.repo_dir / self.categories_file

    @property
    def mock_channels_enabled(self) -> bool:
        """Placeholder channels are only ever allowed outside production."""
        return self.allow_mock_channels and not self.is_production


@lru_cache()
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
