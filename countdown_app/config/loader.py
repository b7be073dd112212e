"""Configuration loader with layered parameter precedence."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from .defaults import (
    AuditParams,
    AuthParams,
    CountdownDefaults,
    DefaultConfig,
    LoggingParams,
    SchedulerParams,
    StorageParams,
    ThemeParams,
    get_default_config,
)

CONFIG_FILENAME = "countdown.yaml"

# Environment variable -> (section, key, converter)
ENV_OVERRIDES: dict[str, tuple[str, str, type]] = {
    "COUNTDOWN_DB_PATH": ("storage", "db_path", str),
    "ADMIN_SECRET_KEY": ("auth", "admin_secret_key", str),
    "COUNTDOWN_LOG_LEVEL": ("logging", "level", str),
    "COUNTDOWN_POLL_INTERVAL": ("scheduler", "poll_interval_seconds", float),
    "COUNTDOWN_AUDIT_LIMIT": ("audit", "retrieval_limit", int),
}


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with layered precedence."""

    config_dir: Path
    defaults: DefaultConfig

    @classmethod
    def create(cls, config_dir: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_config(),
        )

    def load_file_config(self) -> dict[str, Any]:
        """Load overrides from the YAML config file, if present."""
        config_file = self.config_dir / CONFIG_FILENAME

        if not config_file.exists():
            return {}

        with open(config_file) as f:
            file_config = yaml.safe_load(f)

        return file_config or {}

    def load_env_config(self, environ: Optional[dict[str, str]] = None) -> dict[str, Any]:
        """Collect overrides from environment variables."""
        environ = os.environ if environ is None else environ
        config: dict[str, Any] = {}

        for var, (section, key, convert) in ENV_OVERRIDES.items():
            raw = environ.get(var)
            if raw is None or raw == "":
                continue
            config.setdefault(section, {})[key] = convert(raw)

        return config

    def merge_config(
        self,
        overrides: Optional[dict[str, Any]] = None,
        environ: Optional[dict[str, str]] = None
    ) -> dict[str, Any]:
        """
        Merge configuration with layered precedence.

        Priority order:
        1. Explicit overrides (highest priority)
        2. Environment variables
        3. YAML config file
        4. Global defaults (lowest priority)
        """
        config = self._dataclass_to_dict(self.defaults)
        config = self._deep_merge(config, self.load_file_config())
        config = self._deep_merge(config, self.load_env_config(environ))

        if overrides:
            config = self._deep_merge(config, overrides)

        return config

    def load(
        self,
        overrides: Optional[dict[str, Any]] = None,
        environ: Optional[dict[str, str]] = None
    ) -> DefaultConfig:
        """Merge all layers and build the typed configuration."""
        return config_from_dict(self.merge_config(overrides, environ))

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name in obj.__dataclass_fields__:
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                else:
                    result[field_name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result


def config_from_dict(config: dict[str, Any]) -> DefaultConfig:
    """
    Build a typed configuration from a merged dictionary.

    Unknown keys are ignored so that config files can carry comments-as-keys
    or settings for other tools.
    """
    countdown = dict(config.get("countdown", {}))
    theme = countdown.pop("theme", {}) or {}

    return DefaultConfig(
        countdown=CountdownDefaults(
            theme=_build(ThemeParams, theme),
            **_known(CountdownDefaults, countdown, exclude=frozenset({"theme"})),
        ),
        audit=_build(AuditParams, config.get("audit", {})),
        scheduler=_build(SchedulerParams, config.get("scheduler", {})),
        storage=_build(StorageParams, config.get("storage", {})),
        auth=_build(AuthParams, config.get("auth", {})),
        logging=_build(LoggingParams, config.get("logging", {})),
    )


def _known(cls: type, values: dict[str, Any], exclude: frozenset = frozenset()) -> dict[str, Any]:
    fields = cls.__dataclass_fields__  # type: ignore[attr-defined]
    return {k: v for k, v in values.items() if k in fields and k not in exclude}


def _build(cls: type, values: Optional[dict[str, Any]]) -> Any:
    return cls(**_known(cls, values or {}))
