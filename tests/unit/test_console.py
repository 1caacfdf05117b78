"""
Unit tests for the console stop command.
"""

import io
import threading

from sitehttpd.core.console import ConsoleMonitor


def run_monitor(text: str, command: str = "stop"):
    """Run a monitor over text to completion; return (stop calls, output)."""
    calls = []
    output = io.StringIO()
    monitor = ConsoleMonitor(
        on_stop=lambda: calls.append(True),
        stream=io.StringIO(text),
        command=command,
        output=output,
    )
    monitor.start()
    monitor.join(timeout=2.0)
    assert not monitor.is_alive()
    return monitor, calls, output.getvalue()


class TestConsoleMonitor:
    """Tests for ConsoleMonitor."""

    def test_stop_command(self):
        monitor, calls, output = run_monitor("stop\n")

        assert calls == [True]
        assert monitor.triggered.is_set()
        assert "Stopping the web server..." in output

    def test_surrounding_whitespace_ignored(self):
        _, calls, _ = run_monitor("   stop  \r\n")
        assert calls == [True]

    def test_other_lines_print_hint(self):
        _, calls, output = run_monitor("hello\nSTOP\nstop\n")

        assert calls == [True]
        assert output.count("Type 'stop' to stop the server.") == 2

    def test_stops_reading_after_command(self):
        """Lines after the command are never read."""
        _, calls, output = run_monitor("stop\nstop\nanything\n")

        assert calls == [True]
        assert "Type 'stop'" not in output

    def test_eof_does_not_stop(self):
        """Closed console: the server keeps running."""
        monitor, calls, _ = run_monitor("hello\n")

        assert calls == []
        assert not monitor.triggered.is_set()

    def test_custom_command(self):
        _, calls, _ = run_monitor("stop\nquit\n", command="quit")
        assert calls == [True]

    def test_is_daemon(self):
        monitor = ConsoleMonitor(on_stop=lambda: None, stream=io.StringIO(""))
        assert monitor.daemon
        assert isinstance(monitor, threading.Thread)
