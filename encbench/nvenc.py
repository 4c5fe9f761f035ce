"""NVIDIA NVENC encoder settings."""

from __future__ import annotations

from itertools import product

from .codecs import Permute

_PRESETS = ("p1", "p2", "p3", "p4", "p5", "p6", "p7")
_TUNES = ("hq", "ll", "ull")
_BASE_BITRATES = (10, 20, 25, 55)


class Nvenc(Permute):
    """Settings permutations for ``h264_nvenc`` and ``hevc_nvenc``."""

    def __init__(self, is_hevc: bool, gpu: int) -> None:
        super().__init__()
        self.presets = list(_PRESETS)
        self.tunes = list(_TUNES)
        # the profile is the only difference between hevc and h264
        self.profiles = ["main"] if is_hevc else ["high"]
        # vbr rate controls are left out as they do not suit game streaming
        self.rate_controls = ["cbr"]
        self.gpu = gpu

    def get_benchmark_settings(self) -> str:
        return (
            f"-preset p1 -tune ll -profile:v {self.profiles[0]} "
            f"-rc cbr -cbr true -gpu {self.gpu}"
        )

    def init(self) -> list[str]:
        return self._load(
            f"-preset {preset} -tune {tune} -profile:v {profile} "
            f"-rc {rate_control} -cbr true -gpu {self.gpu}"
            for preset, tune, profile, rate_control in product(
                self.presets, self.tunes, self.profiles, self.rate_controls
            )
        )

    @classmethod
    def get_resolution_to_bitrate_map(cls, fps: int) -> dict[str, int]:
        return cls._bitrate_map(_BASE_BITRATES, fps)