"""Vendor detection, resolution/bitrate tables and the encoder permutation base."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from enum import Enum

SUPPORTED_RESOLUTIONS: tuple[str, ...] = (
    "1280x720",
    "1920x1080",
    "2560x1440",
    "3840x2160",
)


class Vendor(Enum):
    """Hardware vendor that provides an encoder."""

    NVIDIA = "nvidia"
    AMD = "amd"
    INTEL_QSV = "intel_qsv"
    UNKNOWN = "unknown"


def get_vendor_for_codec(codec: str) -> Vendor:
    """Work out the vendor from an ffmpeg encoder name."""
    if "nvenc" in codec:
        return Vendor.NVIDIA
    if "amf" in codec:
        return Vendor.AMD
    if any(name in codec for name in ("h264_qsv", "hevc_qsv", "av1_qsv")):
        return Vendor.INTEL_QSV
    return Vendor.UNKNOWN


def map_res_to_bitrate(bitrates: Sequence[int]) -> dict[str, int]:
    """Pair each supported resolution with its bitrate, in order."""
    if len(bitrates) != len(SUPPORTED_RESOLUTIONS):
        raise ValueError(
            f"expected {len(SUPPORTED_RESOLUTIONS)} bitrates, got {len(bitrates)}"
        )
    return dict(zip(SUPPORTED_RESOLUTIONS, bitrates))


class Permute(ABC):
    """Iterable set of encoder setting strings.

    Iterating yields ``(index, settings)`` pairs over whatever was loaded by
    the last call to :meth:`init` or :meth:`run_standard_only`.
    """

    def __init__(self) -> None:
        self._permutations: list[str] = []
        self._index = -1

    @abstractmethod
    def init(self) -> list[str]:
        """Compute every settings permutation and reset iteration."""

    @abstractmethod
    def get_benchmark_settings(self) -> str:
        """Return the settings used for the standard benchmark run."""

    @classmethod
    @abstractmethod
    def get_resolution_to_bitrate_map(cls, fps: int) -> dict[str, int]:
        """Return the bitrate (Mb/s) to use for each resolution at ``fps``."""

    def run_standard_only(self) -> list[str]:
        """Replace the permutations with just the standard benchmark settings."""
        return self._load([self.get_benchmark_settings()])

    def _load(self, settings: Iterable[str]) -> list[str]:
        self._index = -1
        self._permutations = list(settings)
        return self._permutations

    @staticmethod
    def _bitrate_map(base_bitrates: Sequence[int], fps: int) -> dict[str, int]:
        # the base values are for 60fps; 120fps needs double the bitrate
        factor = 2 if fps == 120 else 1
        return map_res_to_bitrate([b * factor for b in base_bitrates])

    def __iter__(self) -> Permute:
        return self

    def __next__(self) -> tuple[int, str]:
        if self._index >= len(self._permutations) - 1:
            raise StopIteration
        self._index += 1
        return self._index, self._permutations[self._index]