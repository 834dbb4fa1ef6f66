"""desklog - daily-rotating console and file logging for desktop applications."""

import logging

from desklog.adapters.logging import DesklogHandler
from desklog.adapters.sinks.console import ConsoleSink, StreamConsole
from desklog.adapters.sinks.in_memory import InMemorySink
from desklog.adapters.sinks.rotating_file import RotatingFileSink
from desklog.core.config import LoggingConfig
from desklog.core.errors import (
    DesklogError,
    DirectoryCreationError,
    RotationError,
    SinkWriteError,
)
from desklog.core.lifecycle import LoggerHandle, get_logger
from desklog.core.logs import LoggerFacade
from desklog.core.models import LifecycleState, LogRecord, RetentionPolicy, Severity
from desklog.core.router import LogRouter

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "ConsoleSink",
    "DesklogError",
    "DesklogHandler",
    "DirectoryCreationError",
    "InMemorySink",
    "LifecycleState",
    "LogRecord",
    "LogRouter",
    "LoggerFacade",
    "LoggerHandle",
    "LoggingConfig",
    "RetentionPolicy",
    "RotatingFileSink",
    "RotationError",
    "Severity",
    "SinkWriteError",
    "StreamConsole",
    "get_logger",
]
