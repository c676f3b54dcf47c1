"""
Configuration management for fwatch.

Process-level knobs come from environment variables and .env files via
pydantic-settings. Routing rules come from a YAML file validated against
the models in app.models.schemas.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.models.schemas import RoutingConfig


class ConfigError(Exception):
    """Routing configuration could not be read or is invalid."""


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Logging
    log_level: str = "INFO"

    # Routing file (None means the XDG default location)
    config_path: Optional[Path] = None

    # Pipeline tuning
    debounce_ms: int = 100
    poll_interval: float = 0.5  # seconds
    timestamp_format: str = "%Y%m%d-%H%M%S"

    model_config = SettingsConfigDict(
        env_prefix="FWATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def debounce_seconds(self) -> float:
        """Debounce interval as seconds."""
        return self.debounce_ms / 1000.0


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def default_config_path() -> Path:
    """
    Resolve the default routing file location.

    Checks XDG_CONFIG_HOME first, then ~/.config, then falls back to
    config.yaml in the working directory.
    """
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "fwatch" / "config.yaml"

    home = os.environ.get("HOME")
    if home:
        return Path(home) / ".config" / "fwatch" / "config.yaml"

    return Path("config.yaml")


def load_routing_config(path: Path) -> RoutingConfig:
    """
    Load and validate a routing configuration file.

    Args:
        path: YAML file to read

    Returns:
        Validated RoutingConfig

    Raises:
        ConfigError: If the file cannot be read, parsed or validated
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"reading config file {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"parsing config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"parsing config file {path}: expected a mapping at top level")

    try:
        return RoutingConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"validating config file {path}: {e}") from e
