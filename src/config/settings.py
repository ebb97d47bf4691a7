# src/config/settings.py — v3
"""Typed configuration loaded from environment / .env via pydantic-settings.

Single source of truth for deployment-specific settings: Figma credentials,
HTTP transport, fetch queue sizing, cache policy, output and logging.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from figmadump.logging.handlers import parse_size


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file and FIGMADUMP_* variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="FIGMADUMP_",
        extra="ignore",
    )

    # === FIGMA API ===
    figma_api_pat: str = Field(
        default="",
        validation_alias=AliasChoices("FIGMA_API_PAT", "figma_api_pat"),
    )
    figma_api_base_url: str = Field(
        default="https://api.figma.com",
        validation_alias=AliasChoices("FIGMA_API_BASE_URL", "figma_api_base_url"),
    )
    http_timeout_seconds: float = 60.0
    rate_limit_retries: int = 3
    rate_limit_base_delay_seconds: float = 2.0

    # === Fetch queue ===
    fetch_concurrency: int = 1
    fetch_timeout_seconds: float | None = None

    # === Cache ===
    cache_policy: Literal["all", "per_scope"] = "all"

    # === Output ===
    output_dir: Path = Path("./out")
    output_format: Literal["json", "csv"] = "csv"

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    # --- Validators ---

    @field_validator("fetch_concurrency")
    @classmethod
    def validate_fetch_concurrency(cls, v: int) -> int:
        if v < 1:
            raise ValueError("fetch_concurrency must be >= 1")
        return v

    @field_validator("rate_limit_retries")
    @classmethod
    def validate_rate_limit_retries(cls, v: int) -> int:
        if v < 0:
            raise ValueError("rate_limit_retries must be >= 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.fetch_timeout_seconds is not None and self.fetch_timeout_seconds <= 0:
            errors.append("FIGMADUMP_FETCH_TIMEOUT_SECONDS must be > 0 when set")

        if self.http_timeout_seconds <= 0:
            errors.append("FIGMADUMP_HTTP_TIMEOUT_SECONDS must be > 0")

        if not self.figma_api_base_url.startswith(("http://", "https://")):
            errors.append("FIGMA_API_BASE_URL must be an http(s) URL")

        try:
            parse_size(self.log_rotation)
        except ValueError as e:
            errors.append(f"FIGMADUMP_LOG_ROTATION: {e}")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def has_token(self) -> bool:
        """True when a Figma personal access token is configured."""
        return bool(self.figma_api_pat.strip())


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (CLI flags or tests).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
