"""Configuration management for workbook assertions.

This module provides centralized configuration using pydantic-settings.
All configuration options can be set via environment variables with the
WBA_ prefix, or via a .env file in the working directory.

Environment Variables:
    WBA_LOG_LEVEL: Logging level for the command line (default: INFO)
    WBA_DEBUG: Enable debug mode (default: false)
    WBA_NUMERIC_ABS_TOLERANCE: Absolute tolerance for numeric cells (default: 0.0)
    WBA_NUMERIC_REL_TOLERANCE: Relative tolerance for numeric cells (default: 0.0)
    WBA_DATA_ONLY: Read cached formula results instead of formulas (default: false)
    WBA_MAX_VALUE_REPR_LENGTH: Truncate values in messages (default: 200)
"""

import logging
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library settings loaded from environment variables.

    Example .env file:
        WBA_LOG_LEVEL=DEBUG
        WBA_NUMERIC_ABS_TOLERANCE=1e-9
    """

    model_config = SettingsConfigDict(
        env_prefix="WBA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # =========================================================================
    # Comparison Settings
    # =========================================================================

    numeric_abs_tolerance: float = 0.0
    """Absolute tolerance for NUMERIC cell values. 0.0 compares exactly."""

    numeric_rel_tolerance: float = 0.0
    """Relative tolerance for NUMERIC cell values. 0.0 compares exactly."""

    max_value_repr_length: int = 200
    """Longest rendering of a cell value in a mismatch message."""

    # =========================================================================
    # Loading Settings
    # =========================================================================

    data_only: bool = False
    """Load cached formula results instead of formula text."""

    # =========================================================================
    # Logging Settings
    # =========================================================================

    log_level: str = "INFO"
    """Logging level: DEBUG, INFO, WARNING, ERROR, or CRITICAL."""

    debug: bool = False
    """Enable debug mode; forces DEBUG logging on the command line."""

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid Python logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(
                f"Invalid log level: {v}. Must be one of: {', '.join(valid_levels)}"
            )
        return upper_v

    @field_validator("numeric_abs_tolerance", "numeric_rel_tolerance")
    @classmethod
    def validate_tolerance(cls, v: float) -> float:
        """Validate tolerance is non-negative."""
        if v < 0.0:
            raise ValueError(f"Tolerance must be non-negative, got {v}")
        return v

    @field_validator("max_value_repr_length")
    @classmethod
    def validate_repr_length(cls, v: int) -> int:
        """Validate the message truncation length leaves room for a value."""
        if v < 10:
            raise ValueError(f"max_value_repr_length must be at least 10, got {v}")
        return v

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def exact_numeric_comparison(self) -> bool:
        """Whether numeric cells compare without tolerance."""
        return self.numeric_abs_tolerance == 0.0 and self.numeric_rel_tolerance == 0.0

    @property
    def log_level_int(self) -> int:
        """Get log level as integer for logging module."""
        if self.debug:
            return logging.DEBUG
        level: int = getattr(logging, self.log_level)
        return level

    def to_safe_dict(self) -> dict[str, Any]:
        """Convert settings to a plain dictionary for logging."""
        return {
            "numeric_abs_tolerance": self.numeric_abs_tolerance,
            "numeric_rel_tolerance": self.numeric_rel_tolerance,
            "max_value_repr_length": self.max_value_repr_length,
            "data_only": self.data_only,
            "log_level": self.log_level,
            "debug": self.debug,
        }


# Create the global settings instance
settings = Settings()
