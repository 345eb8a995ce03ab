"""
YAML configuration for the event client.

Example::

    client:
      address: localhost:1035
      datagrams: 1000
      datagram_size: 1024
      cache: 20
      ip_detail: 1.2.3.4
    logging:
      level: DEBUG
      file: logs/event-client.log
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml


class ConfigError(Exception):
    """Raised when a configuration file cannot be loaded."""
    pass


class ConfigManager:
    """Loads a YAML mapping and provides dotted-key access."""

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self._config: Dict[str, Any] = data or {}

    @classmethod
    def load(cls, path: Union[str, Path]) -> "ConfigManager":
        config_path = Path(path)
        if not config_path.exists():
            raise ConfigError(f"config file not found: {config_path}")

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"invalid YAML in {config_path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"{config_path} must contain a mapping")
        return cls(data)

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Example:
            config.get("client.address")
            config.get("logging.level", "INFO")
        """
        value: Any = self._config
        try:
            for key in key_path.split("."):
                value = value[key]
            return value
        except (KeyError, TypeError):
            return default

    def section(self, name: str) -> Dict[str, Any]:
        value = self.get(name, {})
        return dict(value) if isinstance(value, dict) else {}

    def get_all(self) -> Dict[str, Any]:
        return self._config.copy()
