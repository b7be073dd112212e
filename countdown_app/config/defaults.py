"""Default configuration parameters for the countdown service."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ThemeParams:
    """Default display colors for a freshly created countdown."""
    primary_color: str = "#EF4444"
    background_color: str = "#0F0F0F"
    text_color: str = "#FFFFFF"
    accent_color: str = "#F97316"


@dataclass(frozen=True)
class CountdownDefaults:
    """Values used when the countdown record is created lazily."""
    event_name: str = "Bashaway 2025"
    start_offset_ms: int = 24 * 60 * 60 * 1000     # Event starts 24h after creation
    duration_ms: int = 6 * 60 * 60 * 1000          # 6h event
    message: str = "Get ready for Bashaway!"
    show_message: bool = True
    default_pause_reason: str = "Paused"
    theme: ThemeParams = field(default_factory=ThemeParams)


@dataclass(frozen=True)
class AuditParams:
    """Audit log retrieval and retention parameters."""
    retrieval_limit: int = 50
    performed_by: str = "admin"
    max_entries: int = 1000          # Oldest entries beyond this are evicted; 0 keeps all


@dataclass(frozen=True)
class SchedulerParams:
    """Scheduled pause poller parameters."""
    poll_interval_seconds: float = 1.0
    auto_resume: bool = True         # Resume once a scheduled pause's duration has elapsed


@dataclass(frozen=True)
class StorageParams:
    """Record and audit store parameters."""
    db_path: str = "countdown.db"
    timeout_seconds: float = 30.0


@dataclass(frozen=True)
class AuthParams:
    """Admin shared-secret parameters."""
    admin_secret_key: str = "bashaway-admin-default-key"


@dataclass(frozen=True)
class LoggingParams:
    """Logging output parameters."""
    level: str = "INFO"
    format_json: bool = False


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    countdown: CountdownDefaults
    audit: AuditParams
    scheduler: SchedulerParams
    storage: StorageParams
    auth: AuthParams
    logging: LoggingParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        countdown=CountdownDefaults(),
        audit=AuditParams(),
        scheduler=SchedulerParams(),
        storage=StorageParams(),
        auth=AuthParams(),
        logging=LoggingParams(),
    )
