"""Core domain models for log records."""

from dataclasses import dataclass
from enum import Enum, IntEnum

# Accepted aliases for level names that differ between ecosystems
_SEVERITY_ALIASES = {"WARNING": "WARN"}


class Severity(IntEnum):
    """Ordered severity of a log record.

    Values line up with the standard library ``logging`` levels so records
    bridged from ``logging`` keep their relative order.
    """

    DEBUG = 10
    INFO = 20
    WARN = 30
    ERROR = 40

    @property
    def label(self) -> str:
        """Lowercase name used in rendered log lines."""
        return self.name.lower()

    @classmethod
    def parse(cls, value: "Severity | str") -> "Severity":
        """Coerce a Severity or a case-insensitive level name to a Severity.

        Args:
            value: A Severity member or a level name such as "info" or "WARNING".

        Returns:
            The matching Severity.

        Raises:
            ValueError: If the name does not match any severity.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            name = value.strip().upper()
            name = _SEVERITY_ALIASES.get(name, name)
            if name in cls.__members__:
                return cls[name]
        raise ValueError(f"Unknown severity: {value!r}")


@dataclass(frozen=True)
class LogRecord:
    """A single log record, shared read-only by every sink.

    Attributes:
        timestamp: Unix timestamp in seconds, stamped at dispatch time.
        severity: Severity of the record.
        message: The log message.
    """

    timestamp: float
    severity: Severity
    message: str


@dataclass(frozen=True)
class RetentionPolicy:
    """Retention limits for dated log files and archived records.

    Attributes:
        max_age_days: Delete data older than this many days (None = no limit).
        max_count: Keep at most this many files/records (None = no limit).
    """

    max_age_days: int | None = None
    max_count: int | None = None

    def __post_init__(self) -> None:
        if self.max_age_days is not None and self.max_age_days <= 0:
            raise ValueError("max_age_days must be a positive integer")
        if self.max_count is not None and self.max_count <= 0:
            raise ValueError("max_count must be a positive integer")


class LifecycleState(Enum):
    """Initialization state of a LoggerHandle."""

    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
