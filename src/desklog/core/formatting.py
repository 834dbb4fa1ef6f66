"""Line formatters for log records."""

from datetime import datetime, timezone

from desklog.core.models import LogRecord


def format_timestamp(timestamp: float) -> str:
    """Render a Unix timestamp as UTC ISO-8601 with milliseconds.

    Example: 1715940000.0 -> "2024-05-17T10:00:00.000Z"
    """
    moment = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _single_line(message: str) -> str:
    return message.replace("\r", "\\r").replace("\n", "\\n")


def format_file_line(record: LogRecord) -> str:
    """Format a record for the on-disk log: ``<timestamp> - <level>: <message>``.

    Line breaks inside the message (e.g. tracebacks) are escaped so every
    record occupies exactly one line of the file.
    """
    timestamp = format_timestamp(record.timestamp)
    return f"{timestamp} - {record.severity.label}: {_single_line(record.message)}"


def format_console_line(record: LogRecord) -> str:
    """Format a record for the console: ``[<level>] <message>``."""
    return f"[{record.severity.label}] {record.message}"
