"""Receiving ffmpeg's ``-progress`` output over TCP to follow frame counts."""

from __future__ import annotations

import socket
import threading
import time

from .cli_util import error_with_ack
from .report_files import capture_group

LOCALHOST = "localhost"
PORT = 1234
_CONNECT_TIMEOUT = 10.0
_READ_POLL = 0.25


class FrameCounter:
    """The latest frame number reported by ffmpeg and the one before it."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.frame = 0
        self.previous_frame = 0

    def update(self, frame: int) -> None:
        """Record a newly reported frame number."""
        with self._lock:
            self.previous_frame = self.frame
            self.frame = frame

    def reset(self) -> None:
        """Go back to zero for the next run."""
        with self._lock:
            self.frame = 0
            self.previous_frame = 0


class StatListener:
    """A background thread reading progress lines from an ffmpeg connection."""

    def __init__(self, connection: socket.socket, counter: FrameCounter) -> None:
        self._connection = connection
        self._counter = counter
        self._stopped = threading.Event()
        self._thread = threading.Thread(target=self._read, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stop reading and wait for the thread to finish."""
        self._stopped.set()
        self._thread.join()

    def _read(self) -> None:
        pending = b""
        with self._connection:
            self._connection.settimeout(_READ_POLL)
            while not self._stopped.is_set():
                try:
                    chunk = self._connection.recv(4096)
                except TimeoutError:
                    continue
                except OSError:
                    break
                if not chunk:
                    break
                pending += chunk
                *lines, pending = pending.split(b"\n")
                for raw in lines:
                    self._handle(raw.decode("utf-8", errors="replace"))

    def _handle(self, line: str) -> None:
        if not is_frame_line(line):
            return
        try:
            frame = extract_frame(line)
        except ValueError:
            return
        self._counter.update(frame)


def start_listening_to_ffmpeg_stats(verbose: bool, counter: FrameCounter) -> StatListener:
    """Wait up to ten seconds for ffmpeg to connect, then follow its progress."""
    with socket.create_server((LOCALHOST, PORT)) as server:
        deadline = time.monotonic() + _CONNECT_TIMEOUT
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                print(
                    f"Unable to connect to ffmpeg output for {int(_CONNECT_TIMEOUT)} "
                    "seconds, either ffmpeg didn't start correctly or the tcp "
                    f"connection: {LOCALHOST}:{PORT} could not be created..."
                )
                error_with_ack(True)
            server.settimeout(min(1.0, remaining))
            try:
                connection, _ = server.accept()
            except TimeoutError:
                if verbose:
                    print("Not able to connect to ffmpeg stat output, will try again...")
                continue
            if verbose:
                print("Connected to ffmpeg's -progress output via TCP...")
            return StatListener(connection, counter)


def is_frame_line(line: str) -> bool:
    """Return whether a progress line carries a frame number."""
    return "frame=" in line


def extract_frame(line: str) -> int:
    """Parse the frame number from a ``frame=N`` progress line."""
    return int(capture_group(line, r"^frame=([0-9]+)"))