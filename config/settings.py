"""Pydantic settings for yield forecaster configuration."""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Allocator
    high_vol_threshold: float = Field(default=0.5, ge=0.0, le=1.0, description="Volatility above which capital shifts to stable pools")
    stable_shift_fraction: float = Field(default=0.8, ge=0.0, le=1.0, description="Fraction of capital moved to stable pools in high volatility")
    eco_boost_multiplier: float = Field(default=1.24, gt=0.0, le=10.0, description="Weight multiplier for eco-flagged pools")

    # Monte Carlo
    default_trial_count: int = Field(default=1000, ge=1, le=100_000, description="Trials per simulation")
    random_seed: Optional[int] = Field(default=None, ge=0, description="Seed for reproducible runs (None = fresh entropy)")
    noise_model: str = Field(default="normal", description="Perturbation distribution: normal or uniform")
    worker_count: int = Field(default=1, ge=1, le=64, description="Worker processes for trial batches")
    confidence_level: float = Field(default=0.95, gt=0.0, lt=1.0, description="Central mass of the reported yield interval")
    deploy_target_yield: float = Field(default=0.60, description="Mean yield required for a deploy recommendation")

    # Storage
    storage_dir: Path = Field(default=Path(".cache/yieldcast"), description="Forecast snapshot directory")

    # Monitoring
    poll_interval_seconds: float = Field(default=30.0, ge=0.0, le=86_400.0, description="Delay between monitor forecasts")

    # Logging
    log_level: str = Field(default="INFO", description="Root log level for the CLI")

    @field_validator("noise_model", mode="before")
    @classmethod
    def parse_noise_model(cls, v):
        """Normalize and check the noise model name."""
        if isinstance(v, str):
            v = v.strip().lower()
        if v not in ("normal", "uniform"):
            raise ValueError(f"noise_model must be 'normal' or 'uniform', got {v!r}")
        return v

    @field_validator("random_seed", mode="before")
    @classmethod
    def parse_random_seed(cls, v):
        """Treat an empty string as no seed."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("storage_dir", mode="before")
    @classmethod
    def parse_storage_dir(cls, v):
        """Convert string to Path."""
        if isinstance(v, str):
            return Path(v)
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def parse_log_level(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v

    def ensure_storage_dir(self) -> Path:
        """Ensure storage directory exists and return it."""
        self.storage_dir.mkdir(parents=True, exist_ok=True)
        return self.storage_dir


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
