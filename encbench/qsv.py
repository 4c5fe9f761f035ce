"""Intel Quick Sync encoder settings (H.264/HEVC and AV1)."""

from __future__ import annotations

from itertools import product

from .codecs import Permute

_PRESETS = ("veryfast", "faster", "fast", "medium", "slow", "slower", "veryslow")
_BASE_BITRATES = (20, 30, 35, 70)


class Qsv(Permute):
    """Settings permutations for ``h264_qsv`` and ``hevc_qsv``."""

    def __init__(self, is_hevc: bool) -> None:
        super().__init__()
        self.presets = list(_PRESETS)
        self.profiles = (
            ["unknown", "main", "mainsp"]
            if is_hevc
            else ["unknown", "baseline", "main", "high"]
        )

    def get_benchmark_settings(self) -> str:
        return "-preset faster -profile main"

    def init(self) -> list[str]:
        return self._load(
            f"-preset {preset} -profile:v {profile}"
            for preset, profile in product(self.presets, self.profiles)
        )

    @classmethod
    def get_resolution_to_bitrate_map(cls, fps: int) -> dict[str, int]:
        return cls._bitrate_map(_BASE_BITRATES, fps)


class Av1Qsv(Permute):
    """Settings permutations for ``av1_qsv``."""

    def __init__(self) -> None:
        super().__init__()
        self.presets = list(_PRESETS)
        self.profiles = ["main"]
        # lower depths lose fps; higher ones gain little
        self.async_depth = ["4"]

    def get_benchmark_settings(self) -> str:
        return "-preset veryfast -profile:v main"

    def init(self) -> list[str]:
        return self._load(
            f"-preset {preset} -profile:v {profile} -async_depth {depth}"
            for preset, profile, depth in product(
                self.presets, self.profiles, self.async_depth
            )
        )

    @classmethod
    def get_resolution_to_bitrate_map(cls, fps: int) -> dict[str, int]:
        return cls._bitrate_map(_BASE_BITRATES, fps)