"""Configuration loader for YAML files.

This module provides configuration loading with support for nested access
and defaults, plus the error type raised for any configuration defect,
including broken calibration tables.

Typical usage example:
    from takeoffperf.core.config import ConfigLoader

    config = ConfigLoader.load("config/calibration/default.yaml")
    name = config.get("calibration.name", default="unnamed")
"""

import logging
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when configuration or calibration data is unusable.

    This signals a defect in the shipped or user-supplied data, never a
    problem with a single request, and is not meant to be recovered from.
    """


class ConfigLoader:
    """Configuration loader for YAML files.

    Examples:
        >>> config = ConfigLoader.load("config/calibration/default.yaml")
        >>> curves = config.get("calibration.altitude_curves", default=[])
    """

    def __init__(self, data: dict[str, Any]) -> None:
        """Initialize with configuration data.

        Args:
            data: Configuration dictionary.
        """
        self._data = data

    @classmethod
    def load(cls, path: str | Path) -> "ConfigLoader":
        """Load configuration from a YAML file.

        Args:
            path: Path to YAML configuration file.

        Returns:
            ConfigLoader instance with loaded data.

        Raises:
            ConfigurationError: If the file is missing, unreadable, not valid
                YAML, or its top level is not a mapping.
        """
        path = Path(path)

        if not path.exists():
            raise ConfigurationError(f"Configuration file not found: {path}")

        try:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to load configuration {path}: {e}") from e

        if data is None:
            data = {}

        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration root must be a mapping: {path}")

        logger.info("Loaded configuration from: %s", path)
        return cls(data)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value using dot notation.

        Args:
            key: Configuration key, e.g. ``"calibration.rotation_speed"``.
            default: Value returned when any part of the key is missing.

        Returns:
            Configuration value or default.
        """
        value = self._data

        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def get_section(self, key: str) -> dict[str, Any]:
        """Get an entire configuration section.

        Args:
            key: Section key (supports dot notation).

        Returns:
            Configuration section as dictionary.

        Raises:
            ConfigurationError: If section not found or not a dict.
        """
        value = self.get(key)

        if value is None:
            raise ConfigurationError(f"Configuration section not found: {key}")

        if not isinstance(value, dict):
            raise ConfigurationError(f"Configuration key is not a section: {key}")

        return value
