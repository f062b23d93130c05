"""Application configuration and settings management."""

from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..reference_data import SUPPORTED_YEARS


class Settings(BaseSettings):
    """Application settings with validation and type hints."""

    model_config = SettingsConfigDict(
        env_prefix="HOSPITAL_FINANCE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="hospital-finance-engine")
    app_env: str = Field(default="development")
    debug: bool = Field(default=False)

    # Logging
    log_level: str = Field(default="INFO")
    log_dir: Path = Field(default=Path("logs"))
    log_to_file: bool = Field(default=False)
    json_logs: bool = Field(default=False)

    # Dataset generation
    random_seed: Optional[int] = Field(default=None)
    variation_percent: float = Field(default=15.0)
    percentage_places: int = Field(default=2)
    supported_years: List[int] = Field(default_factory=lambda: list(SUPPORTED_YEARS))

    # Catalog build
    build_workers: int = Field(default=1)

    @field_validator("app_env")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate application environment."""
        allowed = {"development", "staging", "production", "test"}
        if v not in allowed:
            raise ValueError(f"app_env must be one of {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v = v.upper()
        if v not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return v

    @field_validator("variation_percent")
    @classmethod
    def validate_variation_percent(cls, v: float) -> float:
        if v < 0:
            raise ValueError("variation_percent must not be negative")
        return v

    @field_validator("percentage_places")
    @classmethod
    def validate_percentage_places(cls, v: int) -> int:
        if not 0 <= v <= 6:
            raise ValueError("percentage_places must be between 0 and 6")
        return v

    @field_validator("supported_years")
    @classmethod
    def validate_supported_years(cls, v: List[int]) -> List[int]:
        """Years must be non-empty and unique; stored ascending."""
        if not v:
            raise ValueError("supported_years must not be empty")
        if len(set(v)) != len(v):
            raise ValueError("supported_years must not contain duplicates")
        return sorted(v)

    @field_validator("build_workers")
    @classmethod
    def validate_build_workers(cls, v: int) -> int:
        if v < 1:
            raise ValueError("build_workers must be at least 1")
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    @property
    def effective_log_level(self) -> str:
        """Log level after applying the debug switch."""
        return "DEBUG" if self.debug else self.log_level

    @property
    def use_json_logs(self) -> bool:
        """Production always logs JSON."""
        return self.json_logs or self.is_production


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
