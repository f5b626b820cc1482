"""
Job Configuration

Settings class using pydantic-settings for environment variable loading.
Defines per-job defaults for frame planning and motion planning.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Job settings loaded from environment variables.

    All settings can be overridden via PHOTOMOTION_-prefixed environment
    variables. For example, job_seed is read from PHOTOMOTION_JOB_SEED.
    """

    model_config = SettingsConfigDict(
        env_prefix="PHOTOMOTION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Determinism
    job_seed: int = Field(default=12345, description="Global per-job seed")

    # Framing
    target_aspect: float = Field(
        default=16 / 9,
        gt=0,
        description="Target aspect ratio (width/height)",
    )
    confidence_threshold: float = Field(
        default=0.55,
        ge=0.0,
        le=1.0,
        description="Plans below this confidence are flagged for review",
    )
    headroom_bias: float = Field(
        default=0.075,
        ge=0.0,
        lt=1.0,
        description="Fraction of crop height to shift the anchor upward",
    )
    max_score_dimension: int = Field(
        default=64,
        ge=3,
        description="Long edge of the downsampled saliency buffer",
    )

    # Frame plan cache / batch
    plan_cache_size: int = Field(default=2000, ge=1, description="Max cached frame plans")
    batch_workers: int = Field(default=4, ge=1, description="Thread pool size for batch planning")

    # Output frame
    frame_width: int = Field(default=1920, gt=0, description="Rendered frame width in pixels")
    frame_height: int = Field(default=1080, gt=0, description="Rendered frame height in pixels")

    # Logging
    log_level: str = Field(default="INFO", description="Root log level for the CLI")


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached job settings instance.

    Uses lru_cache to ensure settings are only loaded once per process.

    Returns:
        Settings: Job settings instance

    Example:
        >>> settings = get_settings()
        >>> print(settings.job_seed)
        12345
    """
    return Settings()
