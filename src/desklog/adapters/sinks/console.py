"""Console sink and the default stream-backed console surface."""

import sys
from collections.abc import Callable
from typing import TextIO

from desklog.core.formatting import format_console_line
from desklog.core.models import LogRecord, Severity
from desklog.core.ports import ConsoleSurfacePort


class StreamConsole:
    """Console surface writing errors to stderr and everything else to stdout.

    Streams are looked up at write time when not given explicitly, so
    redirections of ``sys.stdout``/``sys.stderr`` after construction apply.
    A missing stream (e.g. windowed apps without a console) drops the line.
    """

    def __init__(
        self, stdout: TextIO | None = None, stderr: TextIO | None = None
    ) -> None:
        self._stdout = stdout
        self._stderr = stderr

    def _stream_for(self, severity: Severity) -> TextIO | None:
        if severity >= Severity.ERROR:
            return self._stderr if self._stderr is not None else sys.stderr
        return self._stdout if self._stdout is not None else sys.stdout

    def write(self, severity: Severity, line: str) -> None:
        stream = self._stream_for(severity)
        if stream is None:
            return
        stream.write(line + "\n")
        stream.flush()


class ConsoleSink:
    """Sink that renders records on an interactive console surface.

    Args:
        threshold: Minimum severity shown on the console.
        surface: Where lines are rendered (defaults to StreamConsole).
        formatter: Renders a record as a single line.
    """

    def __init__(
        self,
        threshold: Severity,
        surface: ConsoleSurfacePort | None = None,
        *,
        formatter: Callable[[LogRecord], str] = format_console_line,
    ) -> None:
        self._threshold = threshold
        self._surface = surface or StreamConsole()
        self._formatter = formatter

    @property
    def threshold(self) -> Severity:
        return self._threshold

    @property
    def surface(self) -> ConsoleSurfacePort:
        return self._surface

    async def write(self, record: LogRecord) -> None:
        """Render a record on the console surface."""
        self._surface.write(record.severity, self._formatter(record))

    async def close(self) -> None:
        """Nothing to release; the surface is owned by the caller."""
