"""Running a single encode and reporting on it."""

from __future__ import annotations

import math
import os
import subprocess
import sys
import time
from collections.abc import Sequence
from dataclasses import replace

from .args import FfmpegArgs
from .cli_util import error_with_ack
from .metadata import MetaData
from .permutation import Permutation
from .progressbar import TrialResult, watch_encode_progress
from .result import FpsStats, PermutationResult, format_dhms
from .threads import CtrlCChannel

_DECODE_FILE_RELEASE_WAIT = 5.0
_ERROR_RUN_WAIT = 20.0


def run_encode(permutation: Permutation, ctrl_channel: CtrlCChannel) -> PermutationResult:
    """Run one permutation's encode (or decode) and return its result."""
    metadata = permutation.load_metadata()
    result = PermutationResult(
        metadata=replace(metadata),
        bitrate=permutation.bitrate,
        encoder_settings=permutation.encoder_settings,
        encoder=permutation.encoder,
        decode_run=permutation.decode_run,
    )

    ffmpeg_args = FfmpegArgs.build(
        permutation.video_file,
        permutation.encoder,
        permutation.encoder_settings,
        permutation.bitrate,
        permutation.decode_run,
    )

    encode_start_time = time.monotonic()

    if permutation.is_decoding:
        if permutation.decode_run:
            # read back the file written by the earlier encode
            ffmpeg_args.setup_decode_input()
        else:
            ffmpeg_args.setup_decode_output()

    trial_result = _run_overload_benchmark(
        metadata,
        ffmpeg_args,
        permutation.verbose,
        permutation.detect_overload,
        ctrl_channel,
    )

    if trial_result.ffmpeg_error:
        error_with_ack(True)

    result.was_overloaded = trial_result.was_overloaded
    result.encode_time = int(time.monotonic() - encode_start_time)

    calculate_fps_statistics(result, trial_result.all_fps)

    # two spaces line up with the progress bar
    print(f"  Average FPS:\t{result.fps_stats.avg}")
    print(f"  1%'ile:\t{result.fps_stats.one_perc_low}")
    print(f"  90%'ile:\t{result.fps_stats.ninety_perc}\n")

    if permutation.decode_run:
        print("Giving ffmpeg a chance to let go of the decode file, hang tight...")
        time.sleep(_DECODE_FILE_RELEASE_WAIT)
        os.remove(ffmpeg_args.first_input)

    return result


def log_permutation_header(
    index: int,
    permutations: Sequence[Permutation],
    calc_time: float | None,
    ignore_factor: float,
) -> None:
    """Print the header for a permutation run, with an estimated time remaining."""
    _log_header(index, permutations, calc_time, True, ignore_factor)


def log_benchmark_header(
    index: int,
    permutations: Sequence[Permutation],
    calc_time: float | None,
) -> None:
    """Print the header for a benchmark run."""
    _log_header(index, permutations, calc_time, False, 1.0)


def _log_header(
    index: int,
    permutations: Sequence[Permutation],
    calc_time: float | None,
    log_eta: bool,
    ignore_factor: float,
) -> None:
    permutation = permutations[index]
    metadata = permutation.load_metadata()
    if log_eta:
        if calc_time is not None:
            eta = calculate_eta(calc_time, index, len(permutations), ignore_factor)
            print(f"[ETR: {format_dhms(eta)}]")
        else:
            print("[ETR: Unknown until first permutation is done]")
    print(f"[Permutation:\t{index + 1}/{len(permutations)}]")
    if permutation.is_decoding:
        print("[Decode Benchmark]" if permutation.decode_run else "[Encode Benchmark]")
    print(f"[Resolution:\t{metadata.width}x{metadata.height}]")
    print(f"[Encoder:\t{permutation.encoder}]")
    print(f"[FPS:\t\t{metadata.fps}]")
    print(f"[Bitrate:\t{permutation.bitrate}Mb/s]")
    print(f"[{permutation.encoder_settings}]")


def spawn_ffmpeg_child(
    ffmpeg_args: FfmpegArgs,
    verbose: bool,
    log_error_output: bool | None = None,
) -> subprocess.Popen:
    """Start ffmpeg with ``ffmpeg_args``; show its output only for error runs."""
    if verbose:
        print(f"V: ffmpeg args: [{ffmpeg_args}]")
        local = replace(ffmpeg_args)
        local.set_no_output_for_error()
        print(
            "V: ffmpeg args no network calls (copy this and run locally, "
            f"minus the quotes): [{local}]"
        )

    effective = replace(ffmpeg_args)
    if log_error_output:
        effective.set_no_output_for_error()

    stream = None if log_error_output else subprocess.DEVNULL
    try:
        return subprocess.Popen(
            ["ffmpeg", *effective.to_list()], stdout=stream, stderr=stream
        )
    except OSError as exc:
        raise RuntimeError("Failed to start instance of ffmpeg") from exc


def _kill(child: subprocess.Popen) -> None:
    child.kill()
    child.wait()


def _run_overload_benchmark(
    metadata: MetaData,
    ffmpeg_args: FfmpegArgs,
    verbose: bool,
    detect_overload: bool,
    ctrl_channel: CtrlCChannel,
) -> TrialResult:
    child = spawn_ffmpeg_child(ffmpeg_args, verbose, None)
    if verbose:
        print("V: Successfully spawned encoding child")

    trial_result = watch_encode_progress(
        metadata.frames,
        detect_overload,
        metadata.fps,
        verbose,
        ffmpeg_args.stats_period,
        ctrl_channel,
    )

    if trial_result.ffmpeg_error and not ctrl_channel.received():
        _kill(child)
        print(
            "Ffmpeg encountered an error when attempting to run, double-check that "
            "your environment is setup correctly. If so, open an issue in github!",
            file=sys.stderr,
        )
        # run again with output shown so the error can be seen
        error_child = spawn_ffmpeg_child(ffmpeg_args, verbose, True)
        time.sleep(_ERROR_RUN_WAIT)
        _kill(error_child)
    elif trial_result.was_overloaded and not ctrl_channel.received():
        _kill(child)
        print(
            "Encoder was overloaded and could not encode the video file in "
            "realtime, stopping..."
        )

    return trial_result


def calculate_fps_statistics(result: PermutationResult, all_fps: list[int]) -> None:
    """Store the average, 1st and 90th percentile of ``all_fps`` on ``result``."""
    if not all_fps:
        raise ValueError("no fps measurements were recorded")
    samples = sorted(all_fps)
    count = len(samples)
    result.fps_stats = FpsStats(
        avg=sum(samples) // count,
        one_perc_low=samples[math.ceil(count / 100)],
        ninety_perc=samples[math.ceil(count * 90 / 100)],
    )


def calculate_eta(
    elapsed: float,
    current_perm: int,
    total_perms: int,
    ignored_factor: float,
) -> int:
    """Estimate the seconds left from the time the last permutation took."""
    seconds = int(elapsed)
    remaining_permutations = total_perms - (current_perm - 1)
    return int(seconds * remaining_permutations * ignored_factor)