"""
dirbridge Configuration Manager.

Centralized configuration with:
- Schema-driven validation
- .env loading and environment variable overrides
- Optional JSON config file
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from dotenv import find_dotenv, load_dotenv

from dirbridge.shared.gate import GateLogger

_log = GateLogger.get("Config")

from dirbridge.Config.schema import (
    CONFIG_SCHEMA,
    ConfigField,
    ConfigType,
    ConfigCategory,
    get_schema_by_key,
    schema_to_dict,
)


CONFIG_FILE_KEY = "DIRBRIDGE_CONFIG_FILE"


class ConfigManager:
    """
    Manages dirbridge configuration.

    Priority order:
    1. Environment variables (a .env file is loaded without overriding them)
    2. JSON config file named by DIRBRIDGE_CONFIG_FILE
    3. Schema defaults
    """

    def __init__(
        self,
        env_file: Optional[Union[str, Path]] = None,
        config_file: Optional[Union[str, Path]] = None,
    ):
        self._cache: Dict[str, Any] = {}
        self._env_file = env_file
        self._config_file = config_file
        self._loaded = False
        self._load()

    def _load(self):
        """Load configuration from all sources."""
        env_file = self._env_file or find_dotenv(usecwd=True)
        if env_file:
            load_dotenv(env_file, override=False)

        config_file = self._config_file or os.environ.get(CONFIG_FILE_KEY)
        json_config = self._read_json(config_file) if config_file else {}

        for field in CONFIG_SCHEMA:
            # Priority: env var > json config > default
            value = os.environ.get(field.env_var)

            if value is None and field.key in json_config:
                value = json_config[field.key]

            if value is None:
                value = field.default

            self._cache[field.key] = self._convert_type(value, field)

        if config_file:
            self._cache[CONFIG_FILE_KEY] = str(config_file)

        self._loaded = True

    def _read_json(self, path: Union[str, Path]) -> Dict[str, Any]:
        """Read the JSON config file, tolerating a missing or broken file."""
        path = Path(path)
        if not path.exists():
            _log.warning(f"Config file not found: {path}")
            return {}

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            _log.error(f"Failed to load config from {path}: {e}")
            return {}

        if not isinstance(data, dict):
            _log.error(f"Config file {path} must hold a JSON object")
            return {}
        return data

    def _convert_type(self, value: Any, field: ConfigField) -> Any:
        """Convert value to appropriate type."""
        if value is None:
            return None

        if field.config_type == ConfigType.BOOLEAN:
            if isinstance(value, bool):
                return value
            return str(value).strip().lower() in ("true", "1", "yes", "on")

        value = str(value).strip()
        if field.options and value.lower() in [o.lower() for o in field.options]:
            # Enumerated values keep the schema's spelling
            for option in field.options:
                if option.lower() == value.lower():
                    return option
        return value or None

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value."""
        if not self._loaded:
            self._load()
        value = self._cache.get(key)
        return default if value is None else value

    def set(self, key: str, value: Any) -> bool:
        """
        Set a configuration value for this process.

        Args:
            key: Config key
            value: New value

        Returns:
            True if the key is known and the value was stored
        """
        field = get_schema_by_key(key)
        if not field:
            return False

        self._cache[key] = self._convert_type(value, field)
        return True

    def get_all(self) -> Dict[str, Any]:
        """Get all configuration values."""
        return {field.key: self._cache.get(field.key) for field in CONFIG_SCHEMA}

    def validate(self) -> Tuple[bool, List[str]]:
        """
        Validate configuration.

        Returns:
            (is_valid, list of error messages)
        """
        errors = []

        for field in CONFIG_SCHEMA:
            value = self._cache.get(field.key)

            if value is not None and field.options and value not in field.options:
                errors.append(f"Invalid option for {field.key}: {value}")

        return len(errors) == 0, errors


# Global instance
_manager: Optional[ConfigManager] = None


def get_manager() -> ConfigManager:
    """Get or create the global ConfigManager."""
    global _manager
    if _manager is None:
        _manager = ConfigManager()
        is_valid, errors = _manager.validate()
        if not is_valid:
            for error in errors:
                _log.warning(error)
        GateLogger.set_level(_manager.get("DIRBRIDGE_LOG_LEVEL", "INFO"))
    return _manager


def reload():
    """Reload configuration from files and environment."""
    global _manager
    _manager = None
    return get_manager()


# Convenience functions
def get(key: str, default: Any = None) -> Any:
    """Get a config value."""
    return get_manager().get(key, default)


def set(key: str, value: Any) -> bool:
    """Set a config value."""
    return get_manager().set(key, value)


def get_all() -> Dict[str, Any]:
    """Get all config values."""
    return get_manager().get_all()


def validate() -> Tuple[bool, List[str]]:
    """Validate configuration."""
    return get_manager().validate()


def get_schema() -> Dict:
    """Get schema as dict for documentation."""
    return schema_to_dict()


__all__ = [
    "ConfigManager",
    "ConfigField",
    "ConfigType",
    "ConfigCategory",
    "CONFIG_SCHEMA",
    "get_manager",
    "reload",
    "get",
    "set",
    "get_all",
    "validate",
    "get_schema",
]
