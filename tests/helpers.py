"""Test doubles and builders shared across test modules."""

from datetime import date, timedelta

from desklog.core.models import LogRecord, Severity


class FakeToday:
    """Controllable replacement for ``date.today``."""

    def __init__(self, start: date) -> None:
        self.current = start

    def __call__(self) -> date:
        return self.current

    def advance(self, days: int = 1) -> None:
        self.current += timedelta(days=days)


class RecordingConsole:
    """Console surface that keeps every rendered line."""

    def __init__(self) -> None:
        self.lines: list[tuple[Severity, str]] = []

    def write(self, severity: Severity, line: str) -> None:
        self.lines.append((severity, line))

    @property
    def rendered(self) -> list[str]:
        return [line for _, line in self.lines]


class FailingSink:
    """Sink whose write always raises the configured exception."""

    def __init__(
        self,
        threshold: Severity = Severity.DEBUG,
        exc: Exception | None = None,
    ) -> None:
        self._threshold = threshold
        self._exc = exc or OSError(28, "No space left on device")
        self.attempts = 0
        self.closed = False

    @property
    def threshold(self) -> Severity:
        return self._threshold

    async def write(self, record: LogRecord) -> None:
        self.attempts += 1
        raise self._exc

    async def close(self) -> None:
        self.closed = True


def make_record(
    message: str = "message",
    severity: Severity = Severity.INFO,
    timestamp: float = 1715940000.0,
) -> LogRecord:
    """Build a LogRecord with sensible defaults."""
    return LogRecord(timestamp=timestamp, severity=severity, message=message)
