"""AMD AMF encoder settings."""

from __future__ import annotations

from itertools import product

from .codecs import Permute

_USAGES = ("transcoding", "ultralowlatency", "lowlatency", "webcam")
_QUALITIES = ("balanced", "speed", "quality")
_BASE_BITRATES = (20, 35, 50, 85)


class Amf(Permute):
    """Settings permutations for ``h264_amf`` and ``hevc_amf``."""

    def __init__(self, is_hevc: bool, gpu: int) -> None:
        super().__init__()
        self.usages = list(_USAGES)
        self.qualities = list(_QUALITIES)
        self.profiles = (
            ["main"]
            if is_hevc
            else ["main", "high", "constrained_baseline", "constrained_high"]
        )
        # h264 has no profile tiers
        self.profile_tiers = ["main", "high"] if is_hevc else []
        # vbr rate controls are left out as they do not suit game streaming
        self.rate_controls = ["cbr"]
        self.gpu = gpu

    def get_benchmark_settings(self) -> str:
        return (
            "-usage ultralowlatency -quality speed -profile:v main "
            f"-rc cbr -cbr true -gpu {self.gpu}"
        )

    def _format(
        self, usage: str, quality: str, profile: str, tier: str, rate_control: str
    ) -> str:
        tier_part = f" -profile_tier {tier}" if tier else ""
        return (
            f"-usage {usage} -quality {quality} -profile:v {profile}{tier_part} "
            f"-rc {rate_control} -cbr true -gpu {self.gpu}"
        )

    def init(self) -> list[str]:
        tiers = self.profile_tiers or [""]
        return self._load(
            self._format(usage, quality, profile, tier, rate_control)
            for usage, quality, profile, tier, rate_control in product(
                self.usages, self.qualities, self.profiles, tiers, self.rate_controls
            )
        )

    @classmethod
    def get_resolution_to_bitrate_map(cls, fps: int) -> dict[str, int]:
        return cls._bitrate_map(_BASE_BITRATES, fps)