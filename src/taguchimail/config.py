"""
Configuration management for TaguchiMail connections.

This module provides the ConfigManager class for reading connection
settings from environment variables (and a local .env file), with caching
and type conversion of the raw string values.
"""

import logging
import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Settings understood by Context.from_env(), mapped to their defaults.
DEFAULT_SETTINGS: Dict[str, Any] = {
    "host": None,
    "organization_id": None,
    "timeout": 60,
    "connect_timeout": 60,
    "debug": False,
}


class ConfigManager:
    """
    Configuration manager that reads from the environment.

    Each setting is read from ``{PREFIX}_{KEY}`` (upper-cased), e.g.
    ``TAGUCHI_HOST`` or ``TAGUCHI_ORGANIZATION_ID``. Values are converted to
    booleans or integers where they look like one.

    Examples:
        >>> config_mgr = ConfigManager()
        >>> host = config_mgr.require('host')
        >>> timeout = config_mgr.get('timeout')
    """

    def __init__(
        self,
        prefix: str = "TAGUCHI",
        defaults: Optional[Dict[str, Any]] = None,
        load_env_file: bool = True,
    ) -> None:
        """
        Initialize the ConfigManager.

        Args:
            prefix: Environment variable prefix (default: "TAGUCHI")
            defaults: Setting names and default values (default: DEFAULT_SETTINGS)
            load_env_file: Whether to load a .env file before reading
        """
        self._prefix = prefix
        self._defaults = dict(DEFAULT_SETTINGS if defaults is None else defaults)
        self._load_env_file = load_env_file
        self._config_cache: Optional[Dict[str, Any]] = None

        logger.debug(f"Initialized ConfigManager (prefix: {prefix})")

    def get_config(self) -> Dict[str, Any]:
        """
        Get the configuration, loading it on first use.

        Returns:
            Dictionary of setting name to converted value
        """
        if self._config_cache is None:
            self.refresh()
        return dict(self._config_cache or {})

    def refresh(self) -> None:
        """Re-read every known setting from the environment."""
        if self._load_env_file:
            load_dotenv()

        config: Dict[str, Any] = {}
        for key, default in self._defaults.items():
            env_var = self._env_var(key)
            env_value = os.getenv(env_var)
            if env_value is None or env_value == "":
                config[key] = default
            else:
                config[key] = self._convert_value(env_value)
                logger.debug(f"Read setting from {env_var}")

        self._config_cache = config
        logger.debug(f"Configuration loaded ({len(config)} settings)")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a specific configuration value.

        Args:
            key: Setting name (e.g. 'host')
            default: Value returned when the setting is unset

        Returns:
            Configuration value or default
        """
        value = self.get_config().get(key)
        return default if value is None else value

    def require(self, key: str) -> Any:
        """
        Get a configuration value that must be set.

        Raises:
            ConfigurationError: If the setting is unset
        """
        value = self.get(key)
        if value is None:
            raise ConfigurationError(
                f"Required setting not found: {self._env_var(key)}\n"
                f"Please set the environment variable or add it to your .env file."
            )
        return value

    def clear_cache(self) -> None:
        """Clear the configuration cache."""
        self._config_cache = None
        logger.debug("Configuration cache cleared")

    def _env_var(self, key: str) -> str:
        return f"{self._prefix}_{key.upper()}"

    def _convert_value(self, value: Any) -> Any:
        """
        Convert string values to appropriate types.

        Attempts to convert to boolean or int; organization IDs and hosts
        that do not parse stay strings.

        Args:
            value: Value to convert

        Returns:
            Converted value
        """
        if not isinstance(value, str):
            return value

        value_lower = value.lower()
        if value_lower in ("true", "yes"):
            return True
        if value_lower in ("false", "no"):
            return False

        try:
            return int(value)
        except ValueError:
            pass

        return value
