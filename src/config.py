"""Application configuration using pydantic-settings pattern."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "Message Search Engine"
    app_version: str = "0.1.0"
    app_env: str = Field(default="development")
    log_level: str = Field(default="INFO")

    # Corpus collaborator
    corpus_backend: Literal["sample", "file", "http"] = Field(default="sample")
    corpus_file: str | None = Field(
        default=None, description="JSON corpus file for the 'file' backend"
    )
    corpus_api_url: str = Field(default="https://hearth.local/api/v1")
    corpus_api_token: str | None = Field(default=None)
    corpus_latency_ms: int = Field(
        default=0,
        ge=0,
        description="Simulated fetch latency for in-memory corpora",
    )

    # Search sessions
    search_debounce_ms: int = Field(
        default=300,
        ge=0,
        description="Coalescing window for rapid successive submissions",
    )
    search_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Fail a search that has not resolved within this many seconds",
    )
    cancel_superseded: bool = Field(default=True)
    max_sessions: int = Field(default=1000, ge=1)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
