import os

from pathlib import Path
from typing import Any

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    def model_post_init(self, __context: Any) -> None:
        """Pick up the legacy score API variable when the primary one is unset."""

        super().model_post_init(__context)

        if not self.score_api_url:
            fallback = os.getenv("SCORE_API_ENDPOINT")
            if fallback:
                object.__setattr__(self, "score_api_url", fallback)

    # Server Settings
    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=8000, description="Server port")
    log_level: str = Field(default="INFO", description="Logging level")

    # Feed store
    redis_url: str = Field(
        default="",
        description="Redis connection string for the per-user feed store (empty disables it)",
    )

    # Content backend
    backend_url: str = Field(default="", description="Base URL of the content backend query API")
    backend_api_key: str = Field(default="", description="Bearer key for the content backend")

    # Scoring service
    score_api_url: str = Field(
        default="",
        description="Endpoint of the relevance scoring service",
        validation_alias=AliasChoices("score_api_url", "SCORE_API_URL"),
    )
    score_api_token: str = Field(default="", description="Bearer token for the scoring service")

    request_timeout_seconds: int = Field(default=30, description="Request timeout")

    # Internal endpoints (job triggers)
    internal_api_key: str = Field(default="", description="Key required by internal job-trigger endpoints")

    # Feed tunables
    feed_max_sections: int = Field(
        default=500,
        ge=1,
        description="Maximum number of sections kept per user feed",
    )
    feed_section_ttl_seconds: int = Field(
        default=86_400,
        ge=1,
        description="Seconds a stored section stays servable before it expires",
    )
    feed_refresh_interval_seconds: int = Field(
        default=3600,
        ge=1,
        description="Sleep between passes of the feed refresh loop",
    )

    @property
    def has_redis(self) -> bool:
        return bool(self.redis_url)

    @property
    def has_score_api(self) -> bool:
        return bool(self.score_api_url)


# Global settings instance
settings = Settings()
