"""
Tests for the schema-driven configuration manager.
"""

import json
import logging

import pytest

from dirbridge import Config
from dirbridge.Config import ConfigManager
from dirbridge.Config.schema import (
    CONFIG_SCHEMA,
    ConfigCategory,
    get_schema_by_category,
    get_schema_by_key,
)


class TestSchema:
    """Tests for the configuration schema."""

    def test_every_field_has_env_var(self):
        """Fields default their env var to the key."""
        for field in CONFIG_SCHEMA:
            assert field.env_var == field.key

    def test_get_schema_by_key(self):
        """Should find fields by key."""
        field = get_schema_by_key("DIRBRIDGE_DIALOG_BACKEND")

        assert field is not None
        assert "zenity" in field.options
        assert get_schema_by_key("NOPE") is None

    def test_get_schema_by_category(self):
        """Should group fields by category."""
        keys = [f.key for f in get_schema_by_category(ConfigCategory.FILESYSTEM)]

        assert "DIRBRIDGE_PROBE_PREFIX" in keys
        assert "DIRBRIDGE_STRICT_DETAILS" in keys

    def test_get_schema_dict(self):
        """Schema dict should list every category."""
        schema = Config.get_schema()

        assert set(schema) == {c.value for c in ConfigCategory}


class TestConfigManager:
    """Tests for ConfigManager resolution order."""

    def test_defaults(self):
        """Unset values fall back to schema defaults."""
        manager = ConfigManager()

        assert manager.get("DIRBRIDGE_PLATFORM") == "auto"
        assert manager.get("DIRBRIDGE_DIALOG_TITLE") == "Select Directory"
        assert manager.get("DIRBRIDGE_STRICT_DETAILS") is False
        assert manager.get("DIRBRIDGE_CONFIG_FILE") is None

    def test_env_var_overrides_default(self, monkeypatch):
        """Environment variables win over defaults."""
        monkeypatch.setenv("DIRBRIDGE_DIALOG_TITLE", "Pick a project")

        assert ConfigManager().get("DIRBRIDGE_DIALOG_TITLE") == "Pick a project"

    @pytest.mark.parametrize("raw,expected", [
        ("true", True),
        ("1", True),
        ("Yes", True),
        ("false", False),
        ("0", False),
        ("", False),
    ])
    def test_boolean_conversion(self, monkeypatch, raw, expected):
        """Boolean fields parse common spellings."""
        monkeypatch.setenv("DIRBRIDGE_STRICT_DETAILS", raw)

        assert ConfigManager().get("DIRBRIDGE_STRICT_DETAILS") is expected

    def test_options_keep_schema_spelling(self, monkeypatch):
        """Enumerated values are matched case-insensitively."""
        monkeypatch.setenv("DIRBRIDGE_PLATFORM", "Linux")
        monkeypatch.setenv("DIRBRIDGE_LOG_LEVEL", "debug")

        manager = ConfigManager()

        assert manager.get("DIRBRIDGE_PLATFORM") == "linux"
        assert manager.get("DIRBRIDGE_LOG_LEVEL") == "DEBUG"

    def test_json_file(self, temp_dir):
        """Values are read from the JSON config file."""
        config_path = temp_dir / "dirbridge.json"
        config_path.write_text(json.dumps({
            "DIRBRIDGE_DIALOG_BACKEND": "kdialog",
            "DIRBRIDGE_STRICT_DETAILS": True,
        }))

        manager = ConfigManager(config_file=config_path)

        assert manager.get("DIRBRIDGE_DIALOG_BACKEND") == "kdialog"
        assert manager.get("DIRBRIDGE_STRICT_DETAILS") is True
        assert manager.get("DIRBRIDGE_CONFIG_FILE") == str(config_path)

    def test_env_var_overrides_json_file(self, temp_dir, monkeypatch):
        """Environment variables win over the JSON file."""
        config_path = temp_dir / "dirbridge.json"
        config_path.write_text(json.dumps({"DIRBRIDGE_DIALOG_BACKEND": "kdialog"}))
        monkeypatch.setenv("DIRBRIDGE_DIALOG_BACKEND", "yad")
        monkeypatch.setenv("DIRBRIDGE_CONFIG_FILE", str(config_path))

        assert ConfigManager().get("DIRBRIDGE_DIALOG_BACKEND") == "yad"

    def test_missing_json_file_is_tolerated(self, temp_dir, caplog):
        """A missing config file logs a warning and uses defaults."""
        with caplog.at_level(logging.WARNING):
            manager = ConfigManager(config_file=temp_dir / "missing.json")

        assert manager.get("DIRBRIDGE_PLATFORM") == "auto"
        assert "Config file not found" in caplog.text

    def test_broken_json_file_is_tolerated(self, temp_dir, caplog):
        """An unparseable config file logs an error and uses defaults."""
        config_path = temp_dir / "broken.json"
        config_path.write_text("{not json")

        with caplog.at_level(logging.ERROR):
            manager = ConfigManager(config_file=config_path)

        assert manager.get("DIRBRIDGE_PLATFORM") == "auto"
        assert "Failed to load config" in caplog.text

    def test_env_file(self, temp_dir, monkeypatch):
        """A .env file fills in unset variables."""
        env_path = temp_dir / ".env"
        env_path.write_text("DIRBRIDGE_PROBE_PREFIX=.probe_test_\n")
        # load_dotenv writes into os.environ; register the key so it is unset afterwards
        monkeypatch.setenv("DIRBRIDGE_PROBE_PREFIX", "")
        monkeypatch.delenv("DIRBRIDGE_PROBE_PREFIX")

        manager = ConfigManager(env_file=env_path)

        assert manager.get("DIRBRIDGE_PROBE_PREFIX") == ".probe_test_"

    def test_env_file_does_not_override_environment(self, temp_dir, monkeypatch):
        """Real environment variables win over the .env file."""
        env_path = temp_dir / ".env"
        env_path.write_text("DIRBRIDGE_DIALOG_TITLE=From dotenv\n")
        monkeypatch.setenv("DIRBRIDGE_DIALOG_TITLE", "From environment")

        assert ConfigManager(env_file=env_path).get("DIRBRIDGE_DIALOG_TITLE") == "From environment"

    def test_set_known_key(self):
        """set() stores converted values for known keys."""
        manager = ConfigManager()

        assert manager.set("DIRBRIDGE_STRICT_DETAILS", "yes") is True
        assert manager.get("DIRBRIDGE_STRICT_DETAILS") is True

    def test_set_unknown_key(self):
        """set() rejects keys outside the schema."""
        assert ConfigManager().set("SOMETHING_ELSE", "x") is False

    def test_validate_reports_bad_option(self, monkeypatch):
        """Values outside an option list are reported."""
        monkeypatch.setenv("DIRBRIDGE_DIALOG_BACKEND", "gtk")

        is_valid, errors = ConfigManager().validate()

        assert is_valid is False
        assert errors == ["Invalid option for DIRBRIDGE_DIALOG_BACKEND: gtk"]

    def test_get_all(self):
        """get_all() returns every schema key."""
        values = ConfigManager().get_all()

        assert set(values) == {f.key for f in CONFIG_SCHEMA}


class TestModuleFunctions:
    """Tests for the module-level configuration helpers."""

    def test_get_uses_global_manager(self, monkeypatch):
        """Module get() reads through a shared manager."""
        monkeypatch.setenv("DIRBRIDGE_DIALOG_TITLE", "Shared")

        assert Config.get("DIRBRIDGE_DIALOG_TITLE") == "Shared"
        assert Config.get_manager() is Config.get_manager()

    def test_get_default_for_unset_value(self):
        """The caller's default applies when a value resolves to None."""
        assert Config.get("DIRBRIDGE_CONFIG_FILE", "fallback") == "fallback"

    def test_reload_picks_up_environment(self, monkeypatch):
        """reload() rebuilds the manager."""
        assert Config.get("DIRBRIDGE_PLATFORM") == "auto"
        monkeypatch.setenv("DIRBRIDGE_PLATFORM", "windows")

        Config.reload()

        assert Config.get("DIRBRIDGE_PLATFORM") == "windows"

    def test_invalid_config_is_logged(self, monkeypatch, caplog):
        """Validation errors are logged when the manager is created."""
        monkeypatch.setenv("DIRBRIDGE_PLATFORM", "beos")

        with caplog.at_level(logging.WARNING):
            Config.get_manager()

        assert "Invalid option for DIRBRIDGE_PLATFORM: beos" in caplog.text
