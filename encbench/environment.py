"""Checks that the external tools the benchmark needs are available."""

from __future__ import annotations

import subprocess


class EnvironmentNotReady(RuntimeError):
    """Raised when ffmpeg or ffprobe cannot be started."""


def is_installed(program: str) -> bool:
    """Return whether ``program`` can be started."""
    try:
        process = subprocess.Popen(
            [program],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except OSError:
        return False
    try:
        process.wait(timeout=10)
    except subprocess.TimeoutExpired:
        process.kill()
        process.wait()
    return True


def fail_if_environment_not_setup() -> None:
    """Raise :class:`EnvironmentNotReady` unless ffmpeg and ffprobe both start."""
    for program in ("ffmpeg", "ffprobe"):
        if not is_installed(program):
            raise EnvironmentNotReady(
                f"{program} is either not installed or not setup on your path correctly"
            )