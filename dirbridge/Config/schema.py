"""
Configuration schema for dirbridge.

Defines all configurable options with metadata for validation
and documentation.
"""

from enum import Enum
from typing import Optional, List, Any
from dataclasses import dataclass


class ConfigType(Enum):
    """How a raw value is converted."""
    STRING = "string"
    BOOLEAN = "boolean"
    PATH = "path"


class ConfigCategory(Enum):
    """Configuration categories for grouping."""
    PLATFORM = "platform"
    DIALOG = "dialog"
    FILESYSTEM = "filesystem"
    LOGGING = "logging"


@dataclass
class ConfigField:
    """One configurable value: key, type, default and allowed options."""
    key: str
    description: str
    config_type: ConfigType
    category: ConfigCategory
    default: Any = None
    env_var: str = None          # Override env var name (defaults to key)
    options: List[str] = None    # For enumerated types

    def __post_init__(self):
        if self.env_var is None:
            self.env_var = self.key


# ==================== Fields ====================

PLATFORM_OPTIONS = ["auto", "linux", "windows", "macos"]
DIALOG_OPTIONS = ["auto", "portal", "zenity", "kdialog", "yad", "tk", "win32", "osascript"]
LOG_LEVEL_OPTIONS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

CONFIG_SCHEMA: List[ConfigField] = [
    # === Platform ===
    ConfigField(
        key="DIRBRIDGE_PLATFORM",
        description="Platform back end to use (auto picks from the running OS)",
        config_type=ConfigType.STRING,
        category=ConfigCategory.PLATFORM,
        default="auto",
        options=PLATFORM_OPTIONS,
    ),

    # === Dialog ===
    ConfigField(
        key="DIRBRIDGE_DIALOG_BACKEND",
        description="Preferred folder chooser (auto tries the platform's choosers in order)",
        config_type=ConfigType.STRING,
        category=ConfigCategory.DIALOG,
        default="auto",
        options=DIALOG_OPTIONS,
    ),
    ConfigField(
        key="DIRBRIDGE_DIALOG_TITLE",
        description="Title shown on the folder chooser",
        config_type=ConfigType.STRING,
        category=ConfigCategory.DIALOG,
        default="Select Directory",
    ),

    # === Filesystem ===
    ConfigField(
        key="DIRBRIDGE_PROBE_PREFIX",
        description="Name prefix of the temporary file used to probe write access",
        config_type=ConfigType.STRING,
        category=ConfigCategory.FILESYSTEM,
        default=".dirbridge_probe_",
    ),
    ConfigField(
        key="DIRBRIDGE_STRICT_DETAILS",
        description="Fail getDirectoryDetails when any entry cannot be stat'ed",
        config_type=ConfigType.BOOLEAN,
        category=ConfigCategory.FILESYSTEM,
        default=False,
    ),

    # === Logging ===
    ConfigField(
        key="DIRBRIDGE_LOG_LEVEL",
        description="Logging level for the dirbridge loggers",
        config_type=ConfigType.STRING,
        category=ConfigCategory.LOGGING,
        default="INFO",
        options=LOG_LEVEL_OPTIONS,
    ),
    ConfigField(
        key="DIRBRIDGE_CONFIG_FILE",
        description="Optional JSON file with configuration values",
        config_type=ConfigType.PATH,
        category=ConfigCategory.PLATFORM,
        default=None,
    ),
]


def get_schema_by_key(key: str) -> Optional[ConfigField]:
    """Field for a key, or None if the key is not configurable."""
    for field in CONFIG_SCHEMA:
        if field.key == key:
            return field
    return None


def get_schema_by_category(category: ConfigCategory) -> List[ConfigField]:
    """Fields belonging to one category, in schema order."""
    return [f for f in CONFIG_SCHEMA if f.category == category]


def schema_to_dict() -> dict:
    """Convert schema to dict for documentation."""
    result = {}
    for cat in ConfigCategory:
        fields = get_schema_by_category(cat)
        result[cat.value] = [
            {
                "key": f.key,
                "description": f.description,
                "type": f.config_type.value,
                "default": f.default,
                "options": f.options,
            }
            for f in fields
        ]
    return result
