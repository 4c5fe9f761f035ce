"""Locating and reading the report files ffmpeg writes."""

from __future__ import annotations

import os
import re
from collections.abc import Iterable
from pathlib import Path

_LOG_NAME = re.compile(r"^ffmpeg.*?\.log$")


def get_latest_ffmpeg_report_file(directory: str | os.PathLike[str] = ".") -> Path:
    """Return the most recently created ffmpeg report in ``directory``."""
    latest = get_latest_log(get_logs_in_directory(directory))
    if latest is None:
        raise FileNotFoundError(f"no ffmpeg report file found in {directory}")
    return latest


def extract_vmaf_score(line: str) -> float:
    """Parse the VMAF score from an ffmpeg log line."""
    return float(capture_group(line, r"VMAF score: (\d+\.\d+)"))


def read_last_line_at(
    line_number: int, directory: str | os.PathLike[str] = "."
) -> str:
    """Return the ``line_number``-th line from the end of the latest report."""
    if line_number < 1:
        raise ValueError("line_number counts from 1")
    path = get_latest_ffmpeg_report_file(directory)
    lines = path.read_text(encoding="utf-8", errors="replace").splitlines()
    if line_number > len(lines):
        raise ValueError(f"{path} has only {len(lines)} lines")
    return lines[-line_number]


def capture_group(text: str, pattern: str) -> str:
    """Return the first capture group of ``pattern`` in ``text``, or ''."""
    match = re.search(pattern, text)
    return match.group(1) if match else ""


def get_logs_in_directory(directory: str | os.PathLike[str]) -> list[Path]:
    """Return the ffmpeg ``*.log`` report files in ``directory``."""
    return sorted(
        entry
        for entry in Path(directory).iterdir()
        if entry.is_file() and _LOG_NAME.match(entry.name)
    )


def _creation_time(path: Path) -> float:
    stat = path.stat()
    # fall back to the modification time where creation time is unavailable
    birth = getattr(stat, "st_birthtime", None)
    return birth if birth is not None else stat.st_mtime


def get_latest_log(log_entries: Iterable[Path]) -> Path | None:
    """Return the entry created last, or None if there are none."""
    latest: Path | None = None
    latest_time = 0.0
    for entry in log_entries:
        created = _creation_time(entry)
        if created > latest_time:
            latest_time = created
            latest = entry
    return latest