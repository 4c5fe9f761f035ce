"""Reading video metadata with ffprobe."""

from __future__ import annotations

import subprocess

from .metadata import MetaData

_PROBE_ARGS = (
    "-v",
    "error",
    "-select_streams",
    "v:0",
    "-show_entries",
    "stream=duration_ts,r_frame_rate,coded_width,coded_height",
    "-of",
    "csv=p=0",
)


def probe_for_video_metadata(input_file: str) -> MetaData:
    """Run ffprobe on ``input_file`` and return its metadata."""
    try:
        completed = subprocess.run(
            ["ffprobe", *_PROBE_ARGS, input_file],
            capture_output=True,
            check=False,
        )
    except OSError as exc:
        raise RuntimeError(
            "Unable to run ffprobe to collect metadata on the input video file"
        ) from exc

    output = completed.stdout.decode("utf-8", errors="replace")
    if not output:
        raise RuntimeError(
            "ffprobe was not able to read information on the file; "
            "check your file paths for accuracy"
        )
    return extract_metadata(output)


def extract_metadata(line: str) -> MetaData:
    """Parse an ffprobe ``width,height,fps/den,frames`` csv line."""
    fields = line.split(",")
    if len(fields) < 4:
        raise ValueError(f"unexpected ffprobe output: {line!r}")
    width, height, rate, frames = fields[:4]
    return MetaData(
        fps=int(rate.split("/")[0].strip()),
        frames=int(frames.strip()),
        width=int(width.strip()),
        height=int(height.strip()),
    )