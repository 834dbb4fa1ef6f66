"""Fan-out of log records to registered sinks."""

import logging
from collections.abc import Iterable

from desklog.core.models import LogRecord
from desklog.core.ports import SinkErrorCallback, SinkPort

_logger = logging.getLogger(__name__)


def _sink_name(sink: SinkPort) -> str:
    return type(sink).__name__


def _report_sink_failure(sink: SinkPort, record: LogRecord, exc: Exception) -> None:
    """Default side channel for recovered sink failures."""
    _logger.warning(
        "%s failed to write %s record: %s",
        _sink_name(sink),
        record.severity.label,
        exc,
    )


def admits(sink: SinkPort, record: LogRecord) -> bool:
    """Return True if the sink's threshold admits the record's severity."""
    return record.severity >= sink.threshold


class LogRouter:
    """Dispatches each record to every sink whose threshold admits it.

    Sinks are called in registration order. A failing sink never prevents
    delivery to the sinks after it, and its failure is reported through
    ``on_error`` instead of being raised to the caller.

    Example:
        ```python
        router = LogRouter([ConsoleSink(Severity.ERROR), RotatingFileSink(path)])
        await router.dispatch(LogRecord(time.time(), Severity.INFO, "started"))
        ```
    """

    def __init__(
        self,
        sinks: Iterable[SinkPort],
        on_error: SinkErrorCallback | None = None,
    ) -> None:
        """Initialize the router with an ordered collection of sinks.

        Args:
            sinks: Sinks in delivery order.
            on_error: Called with (sink, record, exception) when a sink fails.
                Defaults to a warning on the ``desklog.core.router`` logger.
        """
        self._sinks = tuple(sinks)
        self._on_error = on_error or _report_sink_failure

    @property
    def sinks(self) -> tuple[SinkPort, ...]:
        """Registered sinks in delivery order."""
        return self._sinks

    async def dispatch(self, record: LogRecord) -> int:
        """Deliver a record to every admitting sink.

        Args:
            record: The record to deliver.

        Returns:
            Number of sinks that accepted the record without error.
        """
        delivered = 0
        for sink in self._sinks:
            if not admits(sink, record):
                continue
            try:
                await sink.write(record)
            except Exception as exc:
                self._report(sink, record, exc)
                continue
            delivered += 1
        return delivered

    def _report(self, sink: SinkPort, record: LogRecord, exc: Exception) -> None:
        try:
            self._on_error(sink, record, exc)
        except Exception:
            _logger.exception(
                "Error callback raised while reporting %s failure", _sink_name(sink)
            )

    async def close(self) -> None:
        """Close every sink, continuing past individual close failures."""
        for sink in self._sinks:
            try:
                await sink.close()
            except Exception:
                _logger.exception("Failed to close %s", _sink_name(sink))
