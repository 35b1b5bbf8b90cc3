"""
Configuration management

Centralized settings using Pydantic BaseSettings for type-safe configuration
with environment variable support.
"""

import logging
import math
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from visual_diff_toolkit.core.exceptions import ConfigurationError
from visual_diff_toolkit.visual_testing.models import ComparisonMethod

logger = logging.getLogger(__name__)


def get_package_root() -> Path:
    """Directory holding the visual_diff_toolkit package (and the optional .env)"""
    return Path(__file__).parent.parent.parent.resolve()


class Settings(BaseSettings):
    """
    Application settings with environment variable support

    Settings can be overridden via environment variables:
    - VISUAL_DIFF_DEFAULT_METHOD=STRICT
    - VISUAL_DIFF_DEFAULT_THRESHOLD=0.5
    - VISUAL_DIFF_MAX_WORKERS=4
    """

    # Comparison defaults
    default_method: ComparisonMethod = ComparisonMethod.PIXEL
    default_threshold: float = 0.1  # percent of pixels allowed to differ

    # Metric tolerances
    pixel_distance_threshold: float = 10.0
    luminance_threshold: float = 10.0

    # Tiling
    tile_rows: int = 256
    max_workers: int = 1

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="VISUAL_DIFF_",
        env_file=str(get_package_root() / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("default_threshold", "pixel_distance_threshold", "luminance_threshold")
    @classmethod
    def _non_negative(cls, value: float) -> float:
        if not math.isfinite(value) or value < 0:
            raise ValueError("must be a finite, non-negative number")
        return value

    @field_validator("tile_rows", "max_workers")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("must be at least 1")
        return value


# Singleton pattern for settings
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get application settings (singleton)

    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        try:
            _settings = Settings()
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid settings: {e}") from e
        logger.debug(f"Loaded settings: {_settings.model_dump()}")
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() re-reads the environment"""
    global _settings
    _settings = None
