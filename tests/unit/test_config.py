"""Unit tests for configuration management."""

import pytest
from pathlib import Path

from countdown_app.config.defaults import get_default_config
from countdown_app.config.loader import ConfigLoader, config_from_dict
from countdown_app.config.validation import ConfigValidator


class TestDefaultConfig:
    """Test suite for default configuration."""

    def test_default_config_creation(self) -> None:
        """Test that default configuration can be created."""
        config = get_default_config()

        assert config.countdown.event_name == "Bashaway 2025"
        assert config.countdown.duration_ms == 21_600_000
        assert config.countdown.start_offset_ms == 86_400_000
        assert config.countdown.theme.primary_color == "#EF4444"
        assert config.audit.retrieval_limit == 50
        assert config.scheduler.auto_resume is True


class TestConfigLoader:
    """Test suite for configuration loader."""

    def test_config_loader_creation(self) -> None:
        """Test that ConfigLoader points at the project config directory."""
        loader = ConfigLoader.create()

        assert isinstance(loader.config_dir, Path)
        assert loader.config_dir.name == "config"

    def test_merge_config_defaults_only(self, tmp_path) -> None:
        """Test config merging with defaults only."""
        loader = ConfigLoader.create(tmp_path)
        config = loader.merge_config(environ={})

        assert config["countdown"]["event_name"] == "Bashaway 2025"
        assert config["countdown"]["theme"]["text_color"] == "#FFFFFF"
        assert config["storage"]["db_path"] == "countdown.db"

    def test_yaml_file_overrides_defaults(self, tmp_path) -> None:
        """Test values from countdown.yaml."""
        (tmp_path / "countdown.yaml").write_text(
            "countdown:\n"
            "  event_name: Hack Night\n"
            "  theme:\n"
            "    primary_color: '#000000'\n"
            "audit:\n"
            "  retrieval_limit: 10\n"
        )

        config = ConfigLoader.create(tmp_path).load(environ={})

        assert config.countdown.event_name == "Hack Night"
        assert config.countdown.theme.primary_color == "#000000"
        assert config.countdown.theme.text_color == "#FFFFFF"
        assert config.audit.retrieval_limit == 10

    def test_empty_yaml_file(self, tmp_path) -> None:
        """Test an empty file contributes nothing."""
        (tmp_path / "countdown.yaml").write_text("")

        assert ConfigLoader.create(tmp_path).load(environ={}) == get_default_config()

    def test_environment_overrides_file(self, tmp_path) -> None:
        """Test environment variables beat the config file."""
        (tmp_path / "countdown.yaml").write_text("storage:\n  db_path: from-file.db\n")

        config = ConfigLoader.create(tmp_path).load(environ={
            "COUNTDOWN_DB_PATH": "from-env.db",
            "ADMIN_SECRET_KEY": "s3cret",
            "COUNTDOWN_POLL_INTERVAL": "0.5",
            "COUNTDOWN_AUDIT_LIMIT": "20",
            "COUNTDOWN_LOG_LEVEL": "",
        })

        assert config.storage.db_path == "from-env.db"
        assert config.auth.admin_secret_key == "s3cret"
        assert config.scheduler.poll_interval_seconds == 0.5
        assert config.audit.retrieval_limit == 20
        assert config.logging.level == "INFO"

    def test_explicit_overrides_win(self, tmp_path) -> None:
        """Test explicit overrides beat the environment."""
        config = ConfigLoader.create(tmp_path).load(
            overrides={"storage": {"db_path": "override.db"}},
            environ={"COUNTDOWN_DB_PATH": "from-env.db"},
        )

        assert config.storage.db_path == "override.db"

    def test_unknown_keys_ignored(self) -> None:
        """Test unknown sections and keys do not break loading."""
        config = config_from_dict({
            "countdown": {"event_name": "X", "colour": "red"},
            "metrics": {"enabled": True},
        })

        assert config.countdown.event_name == "X"


class TestConfigValidator:
    """Test suite for configuration validation."""

    def test_default_config_is_valid(self, tmp_path) -> None:
        """Test the merged defaults pass validation."""
        config = ConfigLoader.create(tmp_path).merge_config(environ={})

        assert ConfigValidator.validate_config(config) == []

    @pytest.mark.parametrize("section,params,field", [
        ("countdown", {"duration_ms": 0}, "duration_ms"),
        ("countdown", {"duration_ms": True}, "duration_ms"),
        ("countdown", {"start_offset_ms": -1}, "start_offset_ms"),
        ("countdown", {"event_name": " "}, "event_name"),
        ("countdown", {"show_message": "yes"}, "show_message"),
        ("scheduler", {"poll_interval_seconds": 0}, "poll_interval_seconds"),
        ("scheduler", {"auto_resume": 1}, "auto_resume"),
        ("audit", {"retrieval_limit": -5}, "retrieval_limit"),
        ("audit", {"max_entries": -1}, "max_entries"),
        ("audit", {"retrieval_limit": 50, "max_entries": 10}, "max_entries"),
        ("auth", {"admin_secret_key": ""}, "admin_secret_key"),
        ("logging", {"level": "LOUD"}, "level"),
    ])
    def test_invalid_params(self, section, params, field) -> None:
        """Test each invalid parameter is reported."""
        errors = ConfigValidator.validate_config({section: params})

        assert len(errors) == 1
        assert errors[0].field == field

    def test_secret_is_redacted(self) -> None:
        """Test the admin secret never appears in validation output."""
        errors = ConfigValidator.validate_auth_params({"admin_secret_key": None})

        assert errors[0].value == "<redacted>"

    def test_multiple_validation_errors(self) -> None:
        """Test errors are collected across sections."""
        errors = ConfigValidator.validate_config({
            "countdown": {"duration_ms": -1, "event_name": ""},
            "audit": {"retrieval_limit": 0},
        })

        assert {e.field for e in errors} == {"duration_ms", "event_name", "retrieval_limit"}
