"""Logging configuration resolved once at startup."""

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path

from desklog.core.models import RetentionPolicy, Severity

DEFAULT_APP_NAME = "desklog"
DEFAULT_ENVIRONMENT = "production"
DEVELOPMENT_ENVIRONMENT = "development"
LOG_FOLDER = "logs"

ENV_VAR = "DESKLOG_ENV"
LOG_DIR_VAR = "DESKLOG_LOG_DIR"
RETENTION_DAYS_VAR = "DESKLOG_RETENTION_DAYS"
RETENTION_COUNT_VAR = "DESKLOG_RETENTION_COUNT"


def console_threshold_for(environment: str) -> Severity:
    """Return the console threshold for an environment.

    Development shows everything down to DEBUG; every other environment
    only shows errors.
    """
    if environment == DEVELOPMENT_ENVIRONMENT:
        return Severity.DEBUG
    return Severity.ERROR


def _parse_positive_int(environ: Mapping[str, str], name: str) -> int | None:
    raw = environ.get(name, "").strip()
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be a positive integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be a positive integer, got {raw!r}")
    return value


@dataclass(frozen=True)
class LoggingConfig:
    """Everything needed to build the sinks, resolved in one place.

    Attributes:
        environment: Environment tag (e.g., "development", "production").
        log_directory: Directory holding the dated log files.
        console_threshold: Minimum severity shown on the console.
        file_threshold: Minimum severity written to disk.
        retention: Optional retention policy for old dated files.
        sqlite_path: Optional SQLite archive path (":memory:" allowed).
    """

    environment: str
    log_directory: Path
    console_threshold: Severity
    file_threshold: Severity = Severity.INFO
    retention: RetentionPolicy | None = None
    sqlite_path: str | None = None

    @property
    def base_name(self) -> str:
        """Undated log file name, e.g. ``desktop.production.log``."""
        return f"desktop.{self.environment}.log"

    @property
    def base_path(self) -> Path:
        """Undated log path; the file sink prefixes the date to its name."""
        return self.log_directory / self.base_name

    @classmethod
    def for_environment(
        cls,
        environment: str,
        app_data_dir: Path,
        **overrides: object,
    ) -> "LoggingConfig":
        """Build a config for an environment rooted at an app-data directory.

        Args:
            environment: Environment tag.
            app_data_dir: Writable application data directory.
            **overrides: Any other LoggingConfig field.
        """
        fields: dict[str, object] = {
            "environment": environment,
            "log_directory": Path(app_data_dir) / LOG_FOLDER,
            "console_threshold": console_threshold_for(environment),
        }
        fields.update(overrides)
        return cls(**fields)  # type: ignore[arg-type]

    @classmethod
    def from_environment(
        cls,
        app_name: str = DEFAULT_APP_NAME,
        environ: Mapping[str, str] | None = None,
        app_data_dir: Path | None = None,
        resolve_app_data_dir: Callable[[str], Path] | None = None,
    ) -> "LoggingConfig":
        """Resolve the config from process environment variables.

        The environment tag is read once from ``DESKLOG_ENV`` (default
        "production"). ``DESKLOG_LOG_DIR`` replaces the resolved log
        directory; ``DESKLOG_RETENTION_DAYS`` and ``DESKLOG_RETENTION_COUNT``
        enable pruning of old log files.

        Args:
            app_name: Application name used to locate the app-data directory.
            environ: Environment mapping (defaults to os.environ).
            app_data_dir: Explicit app-data directory, skips resolution.
            resolve_app_data_dir: Resolver used when app_data_dir is None.

        Raises:
            ValueError: If a retention variable is not a positive integer.
        """
        if environ is None:
            environ = os.environ
        environment = environ.get(ENV_VAR) or DEFAULT_ENVIRONMENT

        if app_data_dir is None:
            if resolve_app_data_dir is None:
                from desklog.adapters.paths import resolve_app_data_dir

            app_data_dir = resolve_app_data_dir(app_name)

        overrides: dict[str, object] = {}
        log_dir = environ.get(LOG_DIR_VAR)
        if log_dir:
            overrides["log_directory"] = Path(log_dir)

        max_age_days = _parse_positive_int(environ, RETENTION_DAYS_VAR)
        max_count = _parse_positive_int(environ, RETENTION_COUNT_VAR)
        if max_age_days is not None or max_count is not None:
            overrides["retention"] = RetentionPolicy(
                max_age_days=max_age_days, max_count=max_count
            )

        return cls.for_environment(environment, app_data_dir, **overrides)
