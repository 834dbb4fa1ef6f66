"""Step definitions for logging.feature."""

import asyncio
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any

import pytest
from pytest_bdd import given, parsers, then, when

from desklog.adapters.sinks.in_memory import InMemorySink
from desklog.adapters.sinks.rotating_file import RotatingFileSink
from desklog.core.config import LoggingConfig
from desklog.core.errors import DirectoryCreationError
from desklog.core.lifecycle import LoggerHandle
from desklog.core.logs import LoggerFacade
from desklog.core.models import LifecycleState, LogRecord
from desklog.core.ports import SinkPort
from desklog.core.router import LogRouter
from tests.helpers import FailingSink, FakeToday, RecordingConsole


def run_async(coro: Any) -> Any:
    """Run a coroutine synchronously."""
    return asyncio.run(coro)


@dataclass
class LoggingScenarioContext:
    """Shared state between steps in a logging scenario."""

    root: Path
    console: RecordingConsole = field(default_factory=RecordingConsole)
    config: LoggingConfig | None = None
    handle: LoggerHandle | None = None
    facade: LoggerFacade | None = None
    clock: FakeToday | None = None
    healthy: InMemorySink | None = None
    failures: list[tuple[SinkPort, LogRecord, Exception]] = field(
        default_factory=list
    )
    error: DirectoryCreationError | None = None

    def require_config(self) -> LoggingConfig:
        assert self.config is not None
        return self.config

    def logger(self) -> LoggerFacade:
        if self.facade is None:
            assert self.handle is not None
            self.facade = run_async(self.handle.get())
        return self.facade

    def today_file(self) -> Path:
        config = self.require_config()
        return config.log_directory / f"{date.today().isoformat()}.{config.base_name}"


def _lines(path: Path) -> list[str]:
    if not path.exists():
        return []
    return path.read_text(encoding="utf-8").splitlines()


@pytest.fixture
def ctx(tmp_path: Path):  # type: ignore[no-untyped-def]
    """Fresh scenario context; closes whatever the scenario opened."""
    context = LoggingScenarioContext(root=tmp_path)
    yield context
    if context.handle is not None:
        run_async(context.handle.aclose())
    elif context.facade is not None:
        run_async(context.facade.router.close())


# === Given ===


@given(parsers.parse('a "{environment}" logger in a fresh application data directory'))
def given_environment_logger(ctx: LoggingScenarioContext, environment: str) -> None:
    ctx.config = LoggingConfig.for_environment(environment, ctx.root / "userData")
    ctx.handle = LoggerHandle(ctx.config, console_surface=ctx.console)


@given(parsers.parse('a file logger whose clock reads "{day}"'))
def given_file_logger_with_clock(ctx: LoggingScenarioContext, day: str) -> None:
    ctx.config = LoggingConfig.for_environment("production", ctx.root)
    ctx.config.log_directory.mkdir(parents=True)
    ctx.clock = FakeToday(date.fromisoformat(day))
    sink = RotatingFileSink(ctx.config.base_path, today=ctx.clock)
    ctx.facade = LoggerFacade(LogRouter([sink]))


@given("a logger whose first sink always fails")
def given_logger_with_failing_sink(ctx: LoggingScenarioContext) -> None:
    ctx.healthy = InMemorySink()
    router = LogRouter(
        [FailingSink(), ctx.healthy],
        on_error=lambda sink, record, exc: ctx.failures.append((sink, record, exc)),
    )
    ctx.facade = LoggerFacade(router)


@given("a regular file occupies the log directory path")
def given_blocking_file(ctx: LoggingScenarioContext) -> None:
    directory = ctx.require_config().log_directory
    directory.parent.mkdir(parents=True, exist_ok=True)
    directory.write_text("not a directory")


# === When ===


@when(parsers.parse('the application logs "{level}" message "{message}"'))
def when_application_logs(
    ctx: LoggingScenarioContext, level: str, message: str
) -> None:
    run_async(ctx.logger().log(level, message))


@when(parsers.parse("the clock advances by {days:d} day"))
def when_clock_advances(ctx: LoggingScenarioContext, days: int) -> None:
    assert ctx.clock is not None
    ctx.clock.advance(days)


@when("the logger is requested")
def when_logger_requested(ctx: LoggingScenarioContext) -> None:
    assert ctx.handle is not None
    ctx.error = None
    try:
        ctx.facade = run_async(ctx.handle.get())
    except DirectoryCreationError as exc:
        ctx.error = exc


@when("the blocking file is removed")
def when_blocking_file_removed(ctx: LoggingScenarioContext) -> None:
    ctx.require_config().log_directory.unlink()


# === Then ===


@then(parsers.parse('the console shows exactly "{line}"'))
def then_console_shows(ctx: LoggingScenarioContext, line: str) -> None:
    assert ctx.console.rendered == [line]


@then(parsers.parse("today's log file holds {count:d} lines"))
def then_today_file_line_count(ctx: LoggingScenarioContext, count: int) -> None:
    assert len(_lines(ctx.today_file())) == count


@then(parsers.parse("today's log file ends with \"{suffix}\""))
def then_today_file_ends_with(ctx: LoggingScenarioContext, suffix: str) -> None:
    assert _lines(ctx.today_file())[-1].endswith(suffix)


@then(parsers.parse('the file "{name}" holds only "{message}"'))
def then_file_holds_only(ctx: LoggingScenarioContext, name: str, message: str) -> None:
    lines = _lines(ctx.require_config().log_directory / name)
    assert [line.split(": ", 1)[1] for line in lines] == [message]


@then(parsers.parse('the healthy sink received "{message}"'))
def then_healthy_sink_received(ctx: LoggingScenarioContext, message: str) -> None:
    assert ctx.healthy is not None
    assert ctx.healthy.messages == [message]


@then("the failure was reported once")
def then_failure_reported_once(ctx: LoggingScenarioContext) -> None:
    [(sink, _, exc)] = ctx.failures
    assert isinstance(sink, FailingSink)
    assert isinstance(exc, OSError)


@then("initialization fails with a directory error")
def then_initialization_fails(ctx: LoggingScenarioContext) -> None:
    assert ctx.error is not None
    assert ctx.error.path == ctx.require_config().log_directory


@then("the logger is uninitialized")
def then_logger_uninitialized(ctx: LoggingScenarioContext) -> None:
    assert ctx.handle is not None
    assert ctx.handle.state is LifecycleState.UNINITIALIZED


@then("the logger is ready")
def then_logger_ready(ctx: LoggingScenarioContext) -> None:
    assert ctx.handle is not None
    assert ctx.error is None
    assert ctx.handle.state is LifecycleState.READY
