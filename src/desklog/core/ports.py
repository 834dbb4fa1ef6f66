"""Port interfaces for sinks and collaborators.

These protocols define the contracts that adapters must implement.
The core domain depends only on these interfaces, not concrete implementations.
"""

from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Protocol, runtime_checkable

from desklog.core.models import LogRecord, Severity


@runtime_checkable
class SinkPort(Protocol):
    """Port for log sinks.

    A sink receives every record whose severity is at or above its threshold.
    The threshold is fixed when the sink is constructed.
    Examples: ConsoleSink, RotatingFileSink, SQLiteSink, InMemorySink.
    """

    @property
    def threshold(self) -> Severity:
        """Minimum severity this sink accepts."""
        ...

    async def write(self, record: LogRecord) -> None:
        """Write a single record."""
        ...

    async def close(self) -> None:
        """Release any resources held by the sink."""
        ...


@runtime_checkable
class ConsoleSurfacePort(Protocol):
    """Port for the interactive console a ConsoleSink renders onto."""

    def write(self, severity: Severity, line: str) -> None:
        """Render one formatted line."""
        ...


# Creates a directory; FileExistsError counts as success for callers
DirectoryMaker = Callable[[Path], Awaitable[None]]

# Receives a sink failure that the router recovered from
SinkErrorCallback = Callable[[SinkPort, LogRecord, Exception], None]
