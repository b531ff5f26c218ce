"""YAML configuration loading for indicator and logging settings."""
import os
from typing import Any, Optional
import yaml


class ConfigError(Exception):
    """Raised when a config file is missing, malformed or cannot be saved."""
    pass


class Config:
    """YAML-backed configuration with dotted-key access.

    Example:
        config = Config("config/config.yaml")
        level = config.get("logging.level", "INFO")
        lengths = config.get("indicators.williams_r.length", 14)
    """

    def __init__(self, config_path: str):
        """Load a config file.

        Args:
            config_path: Path to the YAML file

        Raises:
            ConfigError: The file does not exist or is not valid YAML
        """
        self._config_path = config_path

        if not os.path.exists(config_path):
            raise ConfigError(f"Config file not found: {config_path}")

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                self._data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Malformed config file: {e}")

        if not isinstance(self._data, dict):
            raise ConfigError(f"Config root must be a mapping: {config_path}")

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        """Look up a value by dotted key, e.g. ``"logging.level"``.

        Args:
            key: Dotted key
            default: Returned when any path segment is missing

        Returns:
            The configured value or ``default``
        """
        keys = key.split(".")
        value = self._data

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def __getitem__(self, key: str) -> Any:
        value = self.get(key)
        if value is None:
            raise KeyError(key)
        return value

    def set(self, key: str, value: Any) -> None:
        """Set a value by dotted key, creating intermediate mappings."""
        keys = key.split(".")
        data = self._data

        for k in keys[:-1]:
            if k not in data:
                data[k] = {}
            data = data[k]

        data[keys[-1]] = value

    def save(self) -> None:
        """Write the current values back to the config file.

        Raises:
            ConfigError: The file cannot be written
        """
        try:
            with open(self._config_path, "w", encoding="utf-8") as f:
                yaml.dump(
                    self._data,
                    f,
                    allow_unicode=True,
                    default_flow_style=False,
                    sort_keys=False
                )
        except OSError as e:
            raise ConfigError(f"Failed to save config: {e}")
