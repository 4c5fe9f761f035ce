"""Building ffmpeg command lines for encode, decode and VMAF runs."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace

from .codecs import Vendor, get_vendor_for_codec

TCP_LISTEN = "tcp://localhost:2000?listen&listen_timeout=3000&timeout=1000000"
NO_OUTPUT = "-f null -"

_HWACCEL = {
    Vendor.NVIDIA: "cuda",
    Vendor.AMD: "d3d11va",
    Vendor.INTEL_QSV: "qsv",
    Vendor.UNKNOWN: "error",
}


def _format_number(value: float) -> str:
    number = float(value)
    return str(int(number)) if number.is_integer() else repr(number)


@dataclass
class FfmpegArgs:
    """The pieces of an ffmpeg invocation."""

    fps_limit: int = 0
    report: bool = False
    send_progress: bool = True
    first_input: str = ""
    second_input: str = ""
    bitrate: int = 0
    encoder: str = ""
    encoder_args: str = ""
    output_args: str = NO_OUTPUT
    is_vmaf: bool = False
    # lower values update the progress bar more often but inflate fps figures
    stats_period: float = 0.5
    decode: bool = False

    @classmethod
    def build(
        cls,
        first_input: str,
        encoder: str,
        encoder_args: str,
        bitrate: int,
        decode: bool,
    ) -> FfmpegArgs:
        """Create arguments for an encode (or decode) of ``first_input``."""
        return cls(
            first_input=first_input,
            bitrate=bitrate,
            encoder=encoder,
            encoder_args=encoder_args,
            decode=decode,
        )

    def map_to_vmaf(self, fps: int) -> FfmpegArgs:
        """Return arguments that score a streamed encode against the source."""
        return replace(
            self,
            # required for high fps inputs to score correctly
            fps_limit=fps,
            second_input=self.first_input,
            first_input=TCP_LISTEN,
            output_args=NO_OUTPUT,
            is_vmaf=True,
            send_progress=False,
            # the vmaf score is read back from the report file
            report=True,
        )

    def __str__(self) -> str:
        parts: list[str] = []
        if self.send_progress:
            parts.append(
                "-progress tcp://localhost:1234 "
                f"-stats_period {_format_number(self.stats_period)}"
            )
        # always overwrite the output
        parts.append("-y")
        if self.decode:
            vendor = get_vendor_for_codec(self.encoder)
            parts.append(f"-hwaccel {_HWACCEL[vendor]}")
        if self.report:
            parts.append("-report")
        if self.fps_limit != 0:
            parts.append(f"-r {self.fps_limit}")
        parts.append(f"-i {self.first_input}")

        if self.second_input:
            if self.fps_limit != 0:
                parts.append(f"-r {self.fps_limit}")
            parts.append(f"-i {self.second_input}")

        if not self.decode:
            if self.is_vmaf:
                parts.append(
                    "-filter_complex "
                    f"libvmaf='n_threads={os.cpu_count() or 1}:n_subsample=5'"
                )
            else:
                parts.append(f"-b:v {self.bitrate}M")
                parts.append(f"-c:v {self.encoder} {self.encoder_args}")

        parts.append(self.output_args)
        return " ".join(parts)

    def _mp4_path(self) -> str:
        return self.first_input.split("y4m")[0] + "mp4"

    def setup_decode_output(self) -> None:
        """Write the encode to an mp4 next to the source instead of discarding it."""
        self.output_args = self._mp4_path()

    def setup_decode_input(self) -> None:
        """Read from the mp4 produced by the earlier encode run."""
        self.first_input = self._mp4_path()

    def set_no_output_for_error(self) -> None:
        """Discard output and stop sending progress, for troubleshooting runs."""
        self.output_args = NO_OUTPUT
        self.send_progress = False

    def to_list(self) -> list[str]:
        """Return the command line split on spaces, as passed to ffmpeg."""
        return str(self).split(" ")