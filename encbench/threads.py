"""Catching Ctrl-C so that long runs can stop cleanly."""

from __future__ import annotations

import queue
import signal
from contextlib import suppress


class CtrlCChannel:
    """Collects Ctrl-C presses so that the main loop can poll for them.

    Used as a context manager, it restores the previous SIGINT handler on exit.
    """

    def __init__(self, capacity: int = 100) -> None:
        self._events: queue.Queue[None] = queue.Queue(maxsize=capacity)
        self._previous_handler = None
        self._installed = False

    def _install(self) -> None:
        self._previous_handler = signal.signal(signal.SIGINT, self._handle)
        self._installed = True

    def _handle(self, signum, frame) -> None:
        print("Received ctrl-c, exiting gracefully...")
        with suppress(queue.Full):
            self._events.put_nowait(None)

    def received(self) -> bool:
        """Return whether a Ctrl-C arrived since the last check."""
        try:
            self._events.get_nowait()
        except queue.Empty:
            return False
        return True

    def exit_on_ctrl_c(self) -> None:
        """Exit the program with status 0 if Ctrl-C was pressed."""
        if self.received():
            print("Ctrl-C acknowledged, program exiting...")
            raise SystemExit(0)

    def __enter__(self) -> CtrlCChannel:
        return self

    def __exit__(self, *exc_info) -> None:
        if self._installed:
            signal.signal(signal.SIGINT, self._previous_handler)
            self._installed = False


def setup_ctrl_channel() -> CtrlCChannel:
    """Install a SIGINT handler and return the channel it reports to."""
    channel = CtrlCChannel()
    channel._install()
    return channel