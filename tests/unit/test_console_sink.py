"""Tests for the console sink."""

import io

import pytest

from desklog.adapters.sinks.console import ConsoleSink, StreamConsole
from desklog.core.models import Severity
from tests.helpers import RecordingConsole, make_record

pytestmark = pytest.mark.storage


class TestConsoleSink:
    """Tests for ConsoleSink."""

    async def test_renders_level_and_message(self, console: RecordingConsole) -> None:
        sink = ConsoleSink(Severity.DEBUG, console)

        await sink.write(make_record("ready", Severity.INFO))

        assert console.lines == [(Severity.INFO, "[info] ready")]

    def test_threshold_is_fixed_at_construction(self) -> None:
        sink = ConsoleSink(Severity.ERROR)
        assert sink.threshold is Severity.ERROR
        with pytest.raises(AttributeError):
            sink.threshold = Severity.DEBUG  # type: ignore[misc]

    async def test_custom_formatter(self, console: RecordingConsole) -> None:
        sink = ConsoleSink(
            Severity.DEBUG, console, formatter=lambda r: r.message.upper()
        )

        await sink.write(make_record("quiet"))

        assert console.rendered == ["QUIET"]

    def test_defaults_to_stream_console(self) -> None:
        assert isinstance(ConsoleSink(Severity.ERROR).surface, StreamConsole)


class TestStreamConsole:
    """Tests for StreamConsole."""

    def test_errors_go_to_stderr(self) -> None:
        out, err = io.StringIO(), io.StringIO()
        StreamConsole(out, err).write(Severity.ERROR, "[error] boom")
        assert err.getvalue() == "[error] boom\n"
        assert out.getvalue() == ""

    @pytest.mark.parametrize("severity", [Severity.DEBUG, Severity.INFO, Severity.WARN])
    def test_other_levels_go_to_stdout(self, severity: Severity) -> None:
        out, err = io.StringIO(), io.StringIO()
        StreamConsole(out, err).write(severity, "line")
        assert out.getvalue() == "line\n"
        assert err.getvalue() == ""

    def test_follows_redirected_process_streams(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Without explicit streams, sys.stdout/sys.stderr are used at write time."""
        console = StreamConsole()
        console.write(Severity.INFO, "to stdout")
        console.write(Severity.ERROR, "to stderr")

        captured = capsys.readouterr()
        assert captured.out == "to stdout\n"
        assert captured.err == "to stderr\n"

    def test_missing_stream_drops_line(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Windowed apps may have no stderr; writing must not fail."""
        import sys

        monkeypatch.setattr(sys, "stderr", None)
        StreamConsole().write(Severity.ERROR, "nowhere to go")
