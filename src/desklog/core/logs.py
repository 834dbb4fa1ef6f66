"""Leveled logging facade over a LogRouter."""

import time

from desklog.core.models import LogRecord, Severity
from desklog.core.router import LogRouter


class LoggerFacade:
    """Public logging surface handed to application code.

    Each call stamps a fresh timestamp and dispatches synchronously through
    the router; nothing is buffered. Sink failures are handled by the router
    and never reach the caller.
    """

    def __init__(self, router: LogRouter) -> None:
        self._router = router

    @property
    def router(self) -> LogRouter:
        return self._router

    async def log(self, severity: Severity | str, message: str) -> None:
        """Log a message at the given severity.

        Args:
            severity: A Severity or a level name (e.g., "debug", "ERROR").
            message: The log message.

        Raises:
            ValueError: If severity is not a known level name.
        """
        record = LogRecord(
            timestamp=time.time(),
            severity=Severity.parse(severity),
            message=message,
        )
        await self._router.dispatch(record)

    async def debug(self, message: str) -> None:
        """Log a message at DEBUG severity."""
        await self.log(Severity.DEBUG, message)

    async def info(self, message: str) -> None:
        """Log a message at INFO severity."""
        await self.log(Severity.INFO, message)

    async def warn(self, message: str) -> None:
        """Log a message at WARN severity."""
        await self.log(Severity.WARN, message)

    async def error(self, message: str) -> None:
        """Log a message at ERROR severity."""
        await self.log(Severity.ERROR, message)
