"""Lazy, single-flight construction of the logging stack.

A LoggerHandle builds the log directory, sinks, router and facade on first
use. Concurrent callers share one in-flight initialization; a failed attempt
leaves the handle uninitialized so a later call can retry.
"""

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from desklog.core.config import LoggingConfig
from desklog.core.errors import DirectoryCreationError
from desklog.core.logs import LoggerFacade
from desklog.core.models import LifecycleState, RetentionPolicy
from desklog.core.ports import (
    ConsoleSurfacePort,
    DirectoryMaker,
    SinkErrorCallback,
    SinkPort,
)
from desklog.core.router import LogRouter

if TYPE_CHECKING:
    from desklog.adapters.sinks.sqlite import SQLiteSink

_logger = logging.getLogger(__name__)


async def _default_make_directory(path: Path) -> None:
    from desklog.adapters.paths import create_directory

    await create_directory(path)


class LoggerHandle:
    """Owner of one lazily-built logging stack.

    The application's composition root creates a handle and passes it (or the
    facade it yields) to the subsystems that log. Only the first ``get()``
    performs I/O; concurrent callers await that same attempt.

    Example:
        ```python
        handle = LoggerHandle()
        log = await handle.get()
        await log.info("application started")
        ```
    """

    def __init__(
        self,
        config: LoggingConfig | None = None,
        *,
        config_loader: Callable[[], LoggingConfig] = LoggingConfig.from_environment,
        make_directory: DirectoryMaker = _default_make_directory,
        console_surface: ConsoleSurfacePort | None = None,
        on_sink_error: SinkErrorCallback | None = None,
    ) -> None:
        """Initialize an uninitialized handle.

        Args:
            config: Explicit configuration; when None, config_loader is
                called during initialization.
            config_loader: Resolves the configuration lazily.
            make_directory: Creates the log directory.
            console_surface: Surface for the console sink (defaults to the
                process stdout/stderr).
            on_sink_error: Side channel for recovered sink failures.
        """
        self._config = config
        self._config_loader = config_loader
        self._make_directory = make_directory
        self._console_surface = console_surface
        self._on_sink_error = on_sink_error
        self._facade: LoggerFacade | None = None
        self._pending: asyncio.Task[LoggerFacade] | None = None

    @property
    def state(self) -> LifecycleState:
        if self._facade is not None:
            return LifecycleState.READY
        if self._pending is not None:
            return LifecycleState.INITIALIZING
        return LifecycleState.UNINITIALIZED

    @property
    def config(self) -> LoggingConfig | None:
        """Configuration in use, once resolved."""
        return self._config

    async def get(self) -> LoggerFacade:
        """Return the shared facade, building the logging stack on first call.

        Raises:
            DirectoryCreationError: If the log directory cannot be created.
                Every caller waiting on the same attempt receives it.
        """
        if self._facade is not None:
            return self._facade
        if self._pending is None:
            self._pending = asyncio.ensure_future(self._initialize())
        pending = self._pending
        try:
            facade = await asyncio.shield(pending)
        except asyncio.CancelledError:
            if not pending.cancelled():
                # Only this caller was cancelled; the attempt keeps running
                raise
            self._forget(pending)
            raise
        except Exception:
            self._forget(pending)
            raise
        if self._pending is pending:
            self._facade = facade
            self._pending = None
        return facade

    def _forget(self, pending: "asyncio.Task[LoggerFacade]") -> None:
        if self._pending is pending:
            self._pending = None

    async def _initialize(self) -> LoggerFacade:
        config = self._config or self._config_loader()
        directory = config.log_directory
        _logger.debug("Initializing logging in %s", directory)
        try:
            await self._make_directory(directory)
        except FileExistsError:
            pass
        except DirectoryCreationError:
            raise
        except OSError as exc:
            raise DirectoryCreationError(directory, exc) from exc
        router = LogRouter(await self._build_sinks(config), self._on_sink_error)
        self._config = config
        _logger.debug("Logging ready for environment %s", config.environment)
        return LoggerFacade(router)

    async def _build_sinks(self, config: LoggingConfig) -> list[SinkPort]:
        from desklog.adapters.sinks.console import ConsoleSink
        from desklog.adapters.sinks.rotating_file import RotatingFileSink

        # Console first so interactive feedback does not wait on disk I/O
        sinks: list[SinkPort] = [
            ConsoleSink(config.console_threshold, self._console_surface),
            RotatingFileSink(
                config.base_path,
                config.file_threshold,
                retention=config.retention,
            ),
        ]
        if config.sqlite_path is not None:
            from desklog.adapters.sinks.sqlite import SQLiteSink

            archive = SQLiteSink(config.sqlite_path, config.file_threshold)
            if config.retention is not None:
                await self._prune_archive(archive, config.retention)
            sinks.append(archive)
        return sinks

    @staticmethod
    async def _prune_archive(archive: "SQLiteSink", policy: RetentionPolicy) -> None:
        """Apply retention to the archive; an unusable archive never fails startup.

        The sink stays registered, so its writes fail and are reported per
        record until the database becomes reachable.
        """
        try:
            removed = await archive.prune(policy)
        except Exception:
            _logger.exception("Failed to prune log archive %s", archive.db_path)
            await archive.close()
            return
        if removed:
            _logger.info("Pruned %d archived records", removed)

    async def aclose(self) -> None:
        """Close every sink and return the handle to the uninitialized state."""
        facade = self._facade
        self._facade = None
        if facade is not None:
            await facade.router.close()


_default_handle: LoggerHandle | None = None


def default_handle() -> LoggerHandle:
    """Return the process-wide default handle, creating it on first use."""
    global _default_handle
    if _default_handle is None:
        _default_handle = LoggerHandle()
    return _default_handle


async def get_logger() -> LoggerFacade:
    """Return the process-wide logger, initializing it on first call.

    Raises:
        DirectoryCreationError: If the log directory cannot be created.
    """
    return await default_handle().get()
