"""Configuration and logging setup for UserScout."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from userscout.models import SignalSource
from userscout.weights import DEFAULT_WEIGHTS, WeightTable

# Default config file location
CONFIG_FILE_PATH = Path.home() / ".config" / "userscout" / "config.toml"


def _load_config_file(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file if it exists.

    Args:
        config_path: Path to config file. Defaults to ~/.config/userscout/config.toml

    Returns:
        Dictionary of configuration values, empty dict if file doesn't exist
    """
    path = config_path or CONFIG_FILE_PATH
    if not path.exists():
        return {}

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        # Config file is optional
        logging.getLogger(__name__).warning(
            "Failed to load config file %s: %s", path, type(e).__name__
        )
        return {}


class Settings(BaseSettings):
    """UserScout settings loaded from environment variables.

    Settings are loaded in priority order:
    1. Environment variables (highest priority)
    2. .env file
    3. ~/.config/userscout/config.toml (lowest priority)

    Confidence bands are fixed thresholds and deliberately not configurable.
    """

    model_config = SettingsConfigDict(
        env_prefix="USERSCOUT_",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Logging
    log_level: str = "INFO"

    # Raise instead of logging when a cluster yields no display name
    strict_invariants: bool = False

    # Max entries in the "companies identified" summary
    companies_limit: int = Field(default=50, ge=0)

    # source value -> base_confidence, applied over the default weight table
    weight_overrides: dict[str, float] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def load_from_config_file(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Load values from config file for any fields not set via env vars."""
        config_data = _load_config_file()

        if not config_data:
            return values

        config_keys = [
            "log_level",
            "strict_invariants",
            "companies_limit",
            "weight_overrides",
        ]

        for key in config_keys:
            # Env var takes precedence
            if key not in values or values[key] is None:
                if key in config_data:
                    values[key] = config_data[key]

        return values

    @field_validator("weight_overrides")
    @classmethod
    def validate_weight_overrides(cls, v: dict[str, float]) -> dict[str, float]:
        """Reject overrides for unknown sources."""
        known = {source.value for source in SignalSource}
        unknown = sorted(set(v) - known)
        if unknown:
            msg = f"Unknown signal source(s) in weight_overrides: {', '.join(unknown)}"
            raise ValueError(msg)
        return v

    def build_weight_table(self) -> WeightTable:
        """Weight table with configured overrides applied.

        Returns:
            DEFAULT_WEIGHTS itself when no overrides are configured.
        """
        if not self.weight_overrides:
            return DEFAULT_WEIGHTS
        return DEFAULT_WEIGHTS.with_overrides(self.weight_overrides)


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the singleton Settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset the singleton Settings instance.

    Primarily used for testing to ensure fresh settings are loaded.
    """
    global _settings
    _settings = None


def configure_logging(level: str = "INFO") -> None:
    """Configure stdlib logging for UserScout."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


__all__ = [
    "Settings",
    "get_settings",
    "reset_settings",
    "configure_logging",
    "CONFIG_FILE_PATH",
]
