"""Python logging handler adapter for desklog.

This adapter bridges Python's standard library logging module to a
LogRouter, so records emitted by third-party libraries through ``logging``
reach the same console and file sinks as the application's own records.
"""

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

from desklog.adapters.async_utils import _run_sync
from desklog.core.models import LogRecord, Severity
from desklog.core.router import LogRouter

# desklog reports its own problems on this logger; never feed it back in
_INTERNAL_LOGGER = "desklog"

_DEFAULT_FORMAT = "%(name)s: %(message)s"


def severity_for_levelno(levelno: int) -> Severity:
    """Map a stdlib logging level number to the closest Severity.

    Levels round down to the nearest severity (e.g. WARNING -> WARN,
    CRITICAL -> ERROR). Anything below DEBUG maps to DEBUG.
    """
    matched = Severity.DEBUG
    for severity in Severity:
        if levelno >= severity.value:
            matched = severity
    return matched


class DesklogHandler(logging.Handler):
    """Logging handler that forwards stdlib log records to a LogRouter.

    Outside an event loop the dispatch runs to completion before ``emit``
    returns. Inside a running loop it is scheduled as a task on that loop.

    Example:
        ```python
        facade = await get_logger()
        logging.getLogger().addHandler(DesklogHandler(facade.router))
        ```
    """

    def __init__(self, router: LogRouter, level: int = logging.NOTSET) -> None:
        """Initialize the handler with the router records are sent to.

        Args:
            router: Router that receives the converted records.
            level: Minimum stdlib level handled.
        """
        super().__init__(level)
        self._router = router
        self._pending: set[asyncio.Task[int]] = set()
        self.setFormatter(logging.Formatter(_DEFAULT_FORMAT))

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name == _INTERNAL_LOGGER or name.startswith(_INTERNAL_LOGGER + "."):
            return False
        return bool(super().filter(record))

    def to_log_record(self, record: logging.LogRecord) -> LogRecord:
        """Convert a stdlib record, keeping its creation time."""
        return LogRecord(
            timestamp=record.created,
            severity=severity_for_levelno(record.levelno),
            message=self.format(record),
        )

    def emit(self, record: logging.LogRecord) -> None:
        """Emit a log record to the router.

        Args:
            record: The log record to emit.
        """
        try:
            entry = self.to_log_record(record)
            self._submit(self._router.dispatch(entry))
        except Exception:
            self.handleError(record)

    def _submit(self, coro: Coroutine[Any, Any, int]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            _run_sync(coro)
            return
        task = loop.create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
