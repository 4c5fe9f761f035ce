"""Detecting the NVIDIA GPUs in the system."""

from __future__ import annotations

import subprocess

_QUERY = ["nvidia-smi", "--query-gpu=name", "--format=csv,noheader"]


def get_gpus() -> list[str]:
    """Return the names of the detected NVIDIA GPUs, in device order."""
    try:
        completed = subprocess.run(
            _QUERY, capture_output=True, text=True, check=True, timeout=30
        )
    except (OSError, subprocess.SubprocessError):
        print(
            "Warning: Unable to auto-detect multiple GPU's, falling back to using "
            "first GPU or provided one via '-gpu' option if specified"
        )
        return []
    return [line.strip() for line in completed.stdout.splitlines() if line.strip()]