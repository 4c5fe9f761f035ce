"""Basic properties of a video source file."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class MetaData:
    """Frame rate, frame count and dimensions of a video."""

    fps: int = 0
    frames: int = 0
    width: int = 0
    height: int = 0

    def resolution(self) -> str:
        """Return the resolution as ``WIDTHxHEIGHT``."""
        return f"{self.width}x{self.height}"

    def is_empty(self) -> bool:
        """Return whether no metadata has been loaded yet."""
        return self.frames == 0

    def __str__(self) -> str:
        return (
            f"Video metadata: fps: {self.fps}, total_frames: {self.frames}, "
            f"resolution: {self.width}x{self.height}"
        )