"""Application configuration and .env loading."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Centralized runtime configuration."""

    analysis_model: str | None = Field(default=None, validation_alias="ANALYSIS_MODEL")
    analysis_model_provider: str | None = Field(
        default=None, validation_alias="ANALYSIS_MODEL_PROVIDER"
    )
    analysis_temperature: float = Field(
        default=0.3, validation_alias="ANALYSIS_TEMPERATURE"
    )
    analysis_timeout: float | None = Field(
        default=None, validation_alias="ANALYSIS_TIMEOUT"
    )
    analysis_max_tokens: int | None = Field(
        default=None, validation_alias="ANALYSIS_MAX_TOKENS"
    )
    analysis_max_retries: int = Field(
        default=2, validation_alias="ANALYSIS_MAX_RETRIES"
    )

    visual_model: str | None = Field(default=None, validation_alias="VISUAL_MODEL")
    visual_model_provider: str | None = Field(
        default=None, validation_alias="VISUAL_MODEL_PROVIDER"
    )
    visual_temperature: float | None = Field(
        default=None, validation_alias="VISUAL_TEMPERATURE"
    )
    visual_timeout: float | None = Field(default=None, validation_alias="VISUAL_TIMEOUT")
    visual_max_tokens: int | None = Field(
        default=2000, validation_alias="VISUAL_MAX_TOKENS"
    )
    visual_max_retries: int = Field(default=2, validation_alias="VISUAL_MAX_RETRIES")
    visual_include_image: bool = Field(
        default=True, validation_alias="VISUAL_INCLUDE_IMAGE"
    )
    visual_request_interval: float = Field(
        default=0.1, ge=0, validation_alias="VISUAL_REQUEST_INTERVAL"
    )

    context_max_chars: int = Field(
        default=2000, ge=1, validation_alias="CONTEXT_MAX_CHARS"
    )
    max_upload_bytes: int = Field(
        default=10 * 1024 * 1024, ge=1, validation_alias="MAX_UPLOAD_BYTES"
    )

    merge_distance_threshold: float = Field(
        default=50.0, ge=0, validation_alias="MERGE_DISTANCE_THRESHOLD"
    )
    semantic_merge_distance: float = Field(
        default=200.0, ge=0, validation_alias="SEMANTIC_MERGE_DISTANCE"
    )
    canvas_width: int = Field(default=800, ge=1, validation_alias="CANVAS_WIDTH")

    langsmith_tracing: bool = Field(default=False, validation_alias="LANGSMITH_TRACING")
    langsmith_project: str = Field(
        default="transeg", validation_alias="LANGSMITH_PROJECT"
    )
    langsmith_endpoint: str | None = Field(
        default=None, validation_alias="LANGSMITH_ENDPOINT"
    )
    langsmith_api_key: str | None = Field(
        default=None, validation_alias="LANGSMITH_API_KEY"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings once from .env/environment."""
    return Settings()


__all__ = ["Settings", "get_settings"]
