"""Results of benchmark runs and writing them to a log file."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from .metadata import MetaData

_RULE = "=" * 162
_BITRATE_RULE = "#" * 162
_COLUMNS = (
    "   [Resolution]\t[FPS]\t[Bitrate]\t{}\t[VMAF Time]\t[VMAF Score]"
    "\t[Average FPS]\t[1%'ile]\t[90%'ile]\t[Encoder Settings]"
)


def format_dhms(seconds: int) -> str:
    """Format a duration in seconds as e.g. ``1d2h3m4s``, leaving out zero parts."""
    seconds = int(seconds)
    if seconds == 0:
        return "0s"
    days, rest = divmod(seconds, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, secs = divmod(rest, 60)
    return "".join(
        f"{value}{unit}"
        for value, unit in ((days, "d"), (hours, "h"), (minutes, "m"), (secs, "s"))
        if value
    )


def _format_score(score: float) -> str:
    return str(int(score)) if float(score).is_integer() else repr(float(score))


@dataclass
class FpsStats:
    """Frame rate statistics of one run."""

    avg: int = 0
    one_perc_low: int = 0
    ninety_perc: int = 0


@dataclass
class PermutationResult:
    """The outcome of running one permutation."""

    metadata: MetaData
    bitrate: int
    encoder_settings: str
    encoder: str
    decode_run: bool = False
    was_overloaded: bool = False
    encode_time: int = 0
    vmaf_calculation_time: int = 0
    vmaf_score: float = 0.0
    fps_stats: FpsStats = field(default_factory=FpsStats)

    def __str__(self) -> str:
        indicator = "[O]" if self.was_overloaded else "   "
        if self.was_overloaded:
            vmaf = f"{self.vmaf_score:.5f}\t\t"
        elif self.vmaf_score != 0.0:
            vmaf = f"{self.vmaf_score:.5f}\t"
        else:
            vmaf = "0.00000\t\t"
        settings = "(Decode)" if self.decode_run else self.encoder_settings
        return (
            f"{indicator}{self.metadata.width}x{self.metadata.height}"
            f"\t{self.metadata.fps}\t{self.bitrate}Mb/s"
            f"\t\t{format_dhms(self.encode_time)}"
            f"\t\t{format_dhms(self.vmaf_calculation_time)}"
            f"\t\t{vmaf}{self.fps_stats.avg}"
            f"\t\t{self.fps_stats.one_perc_low}"
            f"\t\t{self.fps_stats.ninety_perc}"
            f"\t\t{settings}"
        )


def log_results_to_file(
    results: Sequence[PermutationResult],
    runtime_str: str,
    dup_results: Sequence[PermutationResult],
    bitrate: int,
    is_benchmark: bool,
    log_directory: str,
) -> Path:
    """Write the results table (and duplicate scores) to a log file; return its path."""
    if not results:
        raise ValueError("there are no results to log")

    first = results[0]
    if is_benchmark:
        file_name = f"{first.encoder}-benchmark.log"
    else:
        file_name = (
            f"{first.encoder}-{first.metadata.resolution()}-{first.metadata.fps}.log"
        )
    if log_directory:
        file_name = f"{log_directory}/{file_name}"

    time_column = (
        "[Encode/Decode Time]"
        if len(results) > 1 and results[1].decode_run
        else "[Encode Time]"
    )
    lines = ["Results from entire permutation:", _RULE, _COLUMNS.format(time_column)]

    current_bitrate = 0
    for result in results:
        # separate bitrate permutations for readability
        if not is_benchmark and current_bitrate != result.bitrate:
            lines.append(_BITRATE_RULE)
            current_bitrate = result.bitrate
        lines.append(str(result))
    lines.append(_RULE)
    lines.append(f"Benchmark runtime: {runtime_str}\n")

    logged_dup_header = False
    for perm in (result for result in results if result.bitrate == bitrate):
        dups = [dup for dup in dup_results if dup.vmaf_score == perm.vmaf_score]
        if not dups:
            continue
        if not logged_dup_header:
            lines.append("Encoder settings that produced identical scores:")
            lines.append(_RULE)
            logged_dup_header = True
        lines.append(f"Identical score: {_format_score(perm.vmaf_score)}")
        lines.append(f"\tEncoded: [{perm.encoder_settings}]")
        lines.extend(f"\tIgnored: [{dup.encoder_settings}]" for dup in dups)
        lines.append("\n")

    lines.append(_RULE)

    path = Path(file_name)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path