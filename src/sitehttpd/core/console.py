"""
Console shutdown monitor.

A daemon thread that reads lines from the console while the server runs.
Typing ``stop`` (surrounding whitespace ignored) shuts the server down;
anything else is ignored and the hint is printed again. This is the only
way the server is asked to stop.
"""

import sys
import threading
import logging
from typing import Callable, Optional, TextIO

logger = logging.getLogger(__name__)


class ConsoleMonitor(threading.Thread):
    """
    Watches a text stream for the stop command.

    Args:
        on_stop: Called once, from this thread, when the command is read.
        stream: Line source. Defaults to sys.stdin, looked up at start.
        command: The line that triggers on_stop.
        output: Where hints are printed. Defaults to sys.stdout.
    """

    def __init__(
        self,
        on_stop: Callable[[], None],
        stream: Optional[TextIO] = None,
        command: str = "stop",
        output: Optional[TextIO] = None,
    ):
        super().__init__(name="ConsoleMonitor", daemon=True)
        self.on_stop = on_stop
        self.stream = stream
        self.command = command
        self.output = output
        self.triggered = threading.Event()

    def run(self):
        stream = self.stream if self.stream is not None else sys.stdin

        for line in stream:
            if line.strip() == self.command:
                logger.info("Stop command received")
                print("Stopping the web server...", file=self.output or sys.stdout)
                self.triggered.set()
                self.on_stop()
                return
            print(f"Type '{self.command}' to stop the server.", file=self.output or sys.stdout)

        # No console (EOF): keep serving, just without a way to stop here.
        logger.debug("Console input closed")
