"""Application settings with environment variable support."""

from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="NEWSDASH_",  # NEWSDASH_API_URL, NEWSDASH_LOG_LEVEL, etc.
        extra="ignore",
        populate_by_name=True,
    )

    # Backend
    api_url: str = Field(
        default="http://localhost:3001",
        validation_alias=AliasChoices("NEWSDASH_API_URL", "NEWS_DASHBOARD_API_URL"),
    )
    request_timeout_seconds: float = 30.0
    clip_timeout_seconds: float = 60.0
    post_timeout_seconds: float = 45.0
    fetch_max_attempts: int = 2
    retry_backoff_max_seconds: float = 5.0
    user_agent: str = "NewsDashMCP/1.0"

    # Result limits
    default_item_limit: int = 20
    max_item_limit: int = 100
    default_search_limit: int = 15
    max_search_limit: int = 50

    # Logging
    log_level: str = "INFO"
    log_json: bool = True
    log_file: Optional[str] = None

    @field_validator("api_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @property
    def fetch_deadline_seconds(self) -> float:
        """Upper bound on one feed fetch across every retry attempt and backoff."""
        attempts = max(self.fetch_max_attempts, 1)
        return self.request_timeout_seconds * attempts + self.retry_backoff_max_seconds * (attempts - 1)


settings = Settings()
