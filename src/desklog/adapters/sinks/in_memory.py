"""In-memory sink."""

from collections import deque
from collections.abc import AsyncIterable

from desklog.core.models import LogRecord, Severity


class InMemorySink:
    """In-memory implementation of SinkPort.

    Keeps records in arrival order. Suitable for testing and
    for embedding a short log view inside the application. When
    ``max_size`` is set, the oldest records are evicted once it is reached.

    Args:
        threshold: Minimum severity stored.
        max_size: Optional maximum number of records to keep.
    """

    def __init__(
        self, threshold: Severity = Severity.DEBUG, max_size: int | None = None
    ) -> None:
        self._threshold = threshold
        self._records: deque[LogRecord] = deque(maxlen=max_size)
        self.closed = False

    @property
    def threshold(self) -> Severity:
        return self._threshold

    @property
    def records(self) -> list[LogRecord]:
        """Snapshot of stored records, oldest first."""
        return list(self._records)

    @property
    def messages(self) -> list[str]:
        return [record.message for record in self._records]

    async def write(self, record: LogRecord) -> None:
        """Store a record."""
        self._records.append(record)

    async def read(self, since: float = 0) -> AsyncIterable[LogRecord]:
        """Read records with timestamp > since, in arrival order."""
        for record in list(self._records):
            if record.timestamp > since:
                yield record

    def clear(self) -> None:
        self._records.clear()

    async def close(self) -> None:
        self.closed = True
