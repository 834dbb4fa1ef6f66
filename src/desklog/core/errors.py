"""Exception hierarchy for desklog."""

from pathlib import Path


class DesklogError(Exception):
    """Base class for all desklog errors."""


class DirectoryCreationError(DesklogError):
    """The log directory does not exist and could not be created.

    Attributes:
        path: Directory that could not be created.
        cause: The underlying OSError.
    """

    def __init__(self, path: Path, cause: OSError) -> None:
        self.path = path
        self.cause = cause
        reason = cause.strerror or str(cause)
        super().__init__(f"cannot create log directory {path}: {reason}")


class SinkWriteError(DesklogError):
    """A sink failed to render or write a record.

    Attributes:
        sink: Name of the failing sink.
        cause: The underlying exception.
    """

    def __init__(self, sink: str, cause: BaseException, detail: str = "") -> None:
        self.sink = sink
        self.cause = cause
        message = f"{sink} failed to write record"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(f"{message}: {cause}")


class RotationError(SinkWriteError):
    """Opening the log file for a new day failed."""
