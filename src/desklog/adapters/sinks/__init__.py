"""Sink adapters implementing SinkPort."""

from desklog.adapters.sinks.console import ConsoleSink, StreamConsole
from desklog.adapters.sinks.in_memory import InMemorySink
from desklog.adapters.sinks.rotating_file import RotatingFileSink
from desklog.adapters.sinks.sqlite import SQLiteSink

__all__ = [
    "ConsoleSink",
    "InMemorySink",
    "RotatingFileSink",
    "SQLiteSink",
    "StreamConsole",
]
