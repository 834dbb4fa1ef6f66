"""SQLite archive sink."""

import asyncio
import sqlite3
import time
from collections.abc import AsyncIterable

import aiosqlite

from desklog.core.models import LogRecord, RetentionPolicy, Severity

_SCHEMA = """
CREATE TABLE IF NOT EXISTS records (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    timestamp REAL NOT NULL,
    severity INTEGER NOT NULL,
    message TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_records_timestamp ON records(timestamp);
CREATE INDEX IF NOT EXISTS idx_records_severity_timestamp
    ON records(severity, timestamp);
"""

_INSERT = """
INSERT INTO records (timestamp, severity, message) VALUES (?, ?, ?)
"""

_SELECT = """
SELECT timestamp, severity, message
FROM records
WHERE timestamp > ?
ORDER BY timestamp ASC, id ASC
"""

_SELECT_AT_LEAST = """
SELECT timestamp, severity, message
FROM records
WHERE timestamp > ? AND severity >= ?
ORDER BY timestamp ASC, id ASC
"""

_COUNT = "SELECT COUNT(*) FROM records"

_DELETE_BEFORE = "DELETE FROM records WHERE timestamp < ?"

_KEEP_NEWEST = """
DELETE FROM records WHERE id NOT IN (
    SELECT id FROM records ORDER BY timestamp DESC, id DESC LIMIT ?
)
"""

_SECONDS_PER_DAY = 86400


class SQLiteSink:
    """Sink archiving records in a SQLite database via aiosqlite.

    A single connection is opened on first use and kept until ``close()``.
    File databases run in WAL mode so other processes (e.g. a log viewer)
    can read while the application writes. After ``close()`` the next call
    opens a fresh connection; for ``:memory:`` that means an empty database.

    Args:
        db_path: Database file path, or ":memory:".
        threshold: Minimum severity archived.
    """

    def __init__(self, db_path: str, threshold: Severity = Severity.INFO) -> None:
        self._db_path = str(db_path)
        self._threshold = threshold
        self._conn: aiosqlite.Connection | None = None
        self._open_lock: asyncio.Lock | None = None

    def _get_lock(self) -> asyncio.Lock:
        """Get or create the open lock (lazy to avoid event loop issues)."""
        if self._open_lock is None:
            self._open_lock = asyncio.Lock()
        return self._open_lock

    @property
    def threshold(self) -> Severity:
        return self._threshold

    @property
    def db_path(self) -> str:
        return self._db_path

    async def _connection(self) -> aiosqlite.Connection:
        if self._conn is not None:
            return self._conn
        async with self._get_lock():
            if self._conn is None:
                conn = await aiosqlite.connect(self._db_path)
                try:
                    if self._db_path != ":memory:":
                        await conn.execute("PRAGMA journal_mode=WAL")
                    await conn.executescript(_SCHEMA)
                except BaseException:
                    await conn.close()
                    raise
                self._conn = conn
        return self._conn

    async def write(self, record: LogRecord) -> None:
        """Archive a record."""
        db = await self._connection()
        await db.execute(
            _INSERT, (record.timestamp, int(record.severity), record.message)
        )
        await db.commit()

    async def read(
        self, since: float = 0, severity: Severity | None = None
    ) -> AsyncIterable[LogRecord]:
        """Read records newer than since, optionally at or above a severity.

        Records are returned in ascending timestamp order, ties in write order.
        """
        db = await self._connection()
        if severity is None:
            query = _SELECT
            params: tuple[float] | tuple[float, int] = (since,)
        else:
            query = _SELECT_AT_LEAST
            params = (since, int(severity))
        async with db.execute(query, params) as cursor:
            async for row in cursor:
                yield LogRecord(
                    timestamp=row[0],
                    severity=Severity(row[1]),
                    message=row[2],
                )

    def read_sync(
        self, since: float = 0, severity: Severity | None = None
    ) -> list[LogRecord]:
        """Synchronous read for non-async callers (e.g. a GUI log viewer).

        Uses its own short-lived sqlite3 connection, so it only sees file
        databases; an in-memory archive is private to the async connection.
        """
        if self._db_path == ":memory:":
            raise ValueError("read_sync() requires a file database")
        if severity is None:
            query = _SELECT
            params: tuple[float] | tuple[float, int] = (since,)
        else:
            query = _SELECT_AT_LEAST
            params = (since, int(severity))
        conn = sqlite3.connect(self._db_path)
        try:
            conn.executescript(_SCHEMA)
            cursor = conn.execute(query, params)
            return [
                LogRecord(timestamp=row[0], severity=Severity(row[1]), message=row[2])
                for row in cursor
            ]
        finally:
            conn.close()

    async def count(self) -> int:
        """Return the number of archived records."""
        db = await self._connection()
        async with db.execute(_COUNT) as cursor:
            row = await cursor.fetchone()
            return row[0] if row else 0

    async def delete_before(self, timestamp: float) -> int:
        """Delete records with timestamp < given value."""
        db = await self._connection()
        cursor = await db.execute(_DELETE_BEFORE, (timestamp,))
        deleted = cursor.rowcount
        await db.commit()
        return deleted

    async def prune(self, policy: RetentionPolicy, now: float | None = None) -> int:
        """Apply a retention policy to the archive.

        Args:
            policy: Age and count limits to enforce.
            now: Reference Unix time (defaults to the current time).

        Returns:
            Number of records deleted.
        """
        if now is None:
            now = time.time()
        deleted = 0
        if policy.max_age_days is not None:
            cutoff = now - policy.max_age_days * _SECONDS_PER_DAY
            deleted += await self.delete_before(cutoff)
        if policy.max_count is not None:
            db = await self._connection()
            cursor = await db.execute(_KEEP_NEWEST, (policy.max_count,))
            deleted += cursor.rowcount
            await db.commit()
        return deleted

    async def close(self) -> None:
        """Close the connection; the next call reopens it."""
        if self._conn is not None:
            await self._conn.close()
            self._conn = None
