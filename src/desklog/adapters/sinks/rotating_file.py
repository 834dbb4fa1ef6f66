"""Daily rotating file sink.

Writes one line per record to ``<YYYY-MM-DD>.<base name>`` next to the
configured base path. The date is checked on every write, so a new file is
opened lazily on the first write of a new day and days without any records
produce no file at all.
"""

import asyncio
import logging
import re
from collections.abc import Callable
from datetime import date, timedelta
from pathlib import Path
from typing import TextIO

from desklog.core.errors import RotationError, SinkWriteError
from desklog.core.formatting import format_file_line
from desklog.core.models import LogRecord, RetentionPolicy, Severity

_logger = logging.getLogger(__name__)


def dated_path(base_path: Path, date_key: str) -> Path:
    """Prepend a date key to the file name of base_path.

    Example: ``/logs/desktop.production.log`` with ``2024-05-17`` becomes
    ``/logs/2024-05-17.desktop.production.log``.
    """
    return base_path.with_name(f"{date_key}.{base_path.name}")


def list_dated_files(base_path: Path) -> list[tuple[date, Path]]:
    """Return the dated siblings of base_path, oldest first."""
    pattern = re.compile(r"^(\d{4}-\d{2}-\d{2})\." + re.escape(base_path.name) + "$")
    found: list[tuple[date, Path]] = []
    if not base_path.parent.is_dir():
        return found
    for candidate in base_path.parent.iterdir():
        match = pattern.match(candidate.name)
        if match is None or not candidate.is_file():
            continue
        try:
            day = date.fromisoformat(match.group(1))
        except ValueError:
            continue
        found.append((day, candidate))
    found.sort()
    return found


def prune_dated_files(
    base_path: Path, policy: RetentionPolicy, today: date
) -> list[Path]:
    """Delete dated log files that fall outside a retention policy.

    Files older than ``policy.max_age_days`` are removed, then only the newest
    ``policy.max_count`` of the remainder are kept. Files for other base
    names in the same directory are never touched.

    Args:
        base_path: Undated log path whose dated siblings are pruned.
        policy: Retention limits to enforce.
        today: Reference date for age computation.

    Returns:
        Paths that were deleted, oldest first.
    """
    files = list_dated_files(base_path)
    doomed: list[Path] = []
    if policy.max_age_days is not None:
        cutoff = today - timedelta(days=policy.max_age_days)
        doomed.extend(path for day, path in files if day < cutoff)
        files = [(day, path) for day, path in files if day >= cutoff]
    if policy.max_count is not None and len(files) > policy.max_count:
        doomed.extend(path for _, path in files[: len(files) - policy.max_count])
    for path in doomed:
        path.unlink(missing_ok=True)
    return doomed


class RotatingFileSink:
    """Sink that appends records to one file per calendar day.

    At most one file handle is open at a time and it is owned exclusively by
    the sink. If opening or writing fails the handle is dropped, so the next
    write retries instead of staying stuck on a broken file.

    Args:
        base_path: Undated log path (directory + base file name).
        threshold: Minimum severity written to disk.
        today: Callable returning the current local date.
        formatter: Renders a record as a single line (no terminator).
        retention: Optional policy applied right after each rotation.
        encoding: Text encoding of the log files.
        errors: Encoding error handler; the default keeps unencodable
            characters (e.g. lone surrogates) as escapes instead of failing.
    """

    def __init__(
        self,
        base_path: Path,
        threshold: Severity = Severity.INFO,
        *,
        today: Callable[[], date] = date.today,
        formatter: Callable[[LogRecord], str] = format_file_line,
        retention: RetentionPolicy | None = None,
        encoding: str = "utf-8",
        errors: str = "backslashreplace",
    ) -> None:
        self._base_path = Path(base_path)
        self._threshold = threshold
        self._today = today
        self._formatter = formatter
        self._retention = retention
        self._encoding = encoding
        self._errors = errors
        self._date_key: str | None = None
        self._handle: TextIO | None = None
        self._lock: asyncio.Lock | None = None

    def _get_lock(self) -> asyncio.Lock:
        """Get or create the write lock (lazy to avoid event loop issues)."""
        if self._lock is None:
            self._lock = asyncio.Lock()
        return self._lock

    @property
    def threshold(self) -> Severity:
        return self._threshold

    @property
    def base_path(self) -> Path:
        return self._base_path

    @property
    def current_date_key(self) -> str | None:
        """Date key of the open file, or None when no file is open."""
        return self._date_key

    @property
    def current_path(self) -> Path | None:
        """Path of the open file, or None when no file is open."""
        if self._date_key is None:
            return None
        return self.path_for(self._date_key)

    def path_for(self, date_key: str) -> Path:
        """Return the file path used for a date key."""
        return dated_path(self._base_path, date_key)

    async def write(self, record: LogRecord) -> None:
        """Append a record to today's file, rotating first if the day changed.

        Raises:
            RotationError: If today's file cannot be opened.
            SinkWriteError: If the line cannot be written.
        """
        line = self._formatter(record) + "\n"
        async with self._get_lock():
            date_key = self._today().isoformat()
            if self._handle is None or date_key != self._date_key:
                await self._rotate(date_key)
            handle = self._handle
            if handle is None:
                raise RuntimeError("rotation left no open log file")
            try:
                await asyncio.to_thread(self._append, handle, line)
            except OSError as exc:
                self._discard_handle()
                raise SinkWriteError(
                    type(self).__name__, exc, str(self.path_for(date_key))
                ) from exc

    @staticmethod
    def _append(handle: TextIO, line: str) -> None:
        handle.write(line)
        handle.flush()

    async def _rotate(self, date_key: str) -> None:
        """Close the current file and open the one for date_key."""
        await self._close_handle()
        path = self.path_for(date_key)
        try:
            self._handle = await asyncio.to_thread(
                open, path, "a", encoding=self._encoding, errors=self._errors
            )
        except OSError as exc:
            raise RotationError(type(self).__name__, exc, str(path)) from exc
        self._date_key = date_key
        _logger.debug("Opened log file %s", path)
        if self._retention is not None:
            await self._prune(self._retention, date.fromisoformat(date_key))

    async def _prune(self, policy: RetentionPolicy, today: date) -> None:
        try:
            removed = await asyncio.to_thread(
                prune_dated_files, self._base_path, policy, today
            )
        except OSError:
            _logger.exception("Failed to prune old log files in %s", self._base_path)
            return
        for path in removed:
            _logger.info("Removed expired log file %s", path)

    async def _close_handle(self) -> None:
        handle = self._handle
        self._handle = None
        self._date_key = None
        if handle is not None:
            await asyncio.to_thread(handle.close)

    def _discard_handle(self) -> None:
        """Drop a handle that failed mid-write without raising again."""
        handle = self._handle
        self._handle = None
        self._date_key = None
        if handle is None:
            return
        try:
            handle.close()
        except OSError:
            _logger.debug("Ignoring close failure on broken log handle", exc_info=True)

    async def close(self) -> None:
        """Close the open file, if any."""
        async with self._get_lock():
            await self._close_handle()
