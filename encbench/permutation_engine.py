"""Running encoder settings permutations, optionally scoring each with VMAF."""

from __future__ import annotations

import os
import time
from collections.abc import Sequence

from .args import FfmpegArgs
from .engine import log_permutation_header, run_encode, spawn_ffmpeg_child
from .permutation import Permutation
from .progressbar import draw_yellow_bar, watch_encode_progress
from .report_files import (
    extract_vmaf_score,
    get_latest_ffmpeg_report_file,
    read_last_line_at,
)
from .result import PermutationResult, format_dhms, log_results_to_file
from .threads import CtrlCChannel, setup_ctrl_channel

TCP_OUTPUT = "-f {} tcp://localhost:2000"

# the VMAF quality to aim for when permuting over bitrates
TARGET_QUALITY = 95.0

# how many times to try calculating a VMAF score before giving up
MAX_ATTEMPTS_CALC_QUALITY = 3


class QualityCheckError(RuntimeError):
    """Raised when no VMAF score could be calculated for a permutation."""


class PermutationEngine:
    """Runs permutations in order, skipping ones known to repeat a VMAF score."""

    def __init__(self, log_files_directory: str) -> None:
        self.permutations: list[Permutation] = []
        self.results: list[PermutationResult] = []
        self.dup_results: list[PermutationResult] = []
        self.vmaf_scores: set[float] = set()
        self.log_files_directory = log_files_directory

    def add(self, permutation: Permutation) -> None:
        """Queue a permutation to run."""
        self.permutations.append(permutation)

    def run(self) -> None:
        """Run the queued permutations, then write the results log."""
        if not self.permutations:
            raise ValueError("there are no permutations to run")

        start = time.monotonic()
        target_quality_found = False
        ignore_factor = 1.0
        calc_time: float | None = None
        total = len(self.permutations)

        with setup_ctrl_channel() as ctrl_channel:
            for index, permutation in enumerate(self.permutations):
                permutation_start = time.monotonic()
                log_permutation_header(
                    index, self.permutations, calc_time, ignore_factor
                )

                # settings already known to repeat a score are skipped to save time
                if (
                    not permutation.allow_duplicates
                    and permutation.check_quality
                    and will_be_duplicate(self.dup_results, permutation)
                ):
                    draw_yellow_bar(permutation.load_metadata().frames)
                    print(
                        "\n!!! Above encoder settings will produce identical vmaf "
                        "score as other permutations, skipping... \n"
                    )
                    continue

                result = run_encode(permutation, ctrl_channel)
                calc_time = time.monotonic() - permutation_start

                if not result.was_overloaded and permutation.check_quality:
                    vmaf_start = time.monotonic()
                    result.vmaf_score = check_encode_quality(
                        permutation, ctrl_channel, permutation.verbose, index
                    )
                    result.vmaf_calculation_time = int(time.monotonic() - vmaf_start)
                    if result.vmaf_score >= TARGET_QUALITY:
                        target_quality_found = True
                    # include the vmaf time in the estimate
                    calc_time = time.monotonic() - permutation_start

                bitrate_over = (
                    index == total - 1
                    or self.permutations[index + 1].bitrate != permutation.bitrate
                )
                self.add_result(
                    result,
                    bitrate_over,
                    permutation.check_quality,
                    permutation.allow_duplicates,
                )

                if bitrate_over:
                    # share of permutations actually run past the first bitrate
                    counted = len(self.results) + len(self.dup_results)
                    ignore_factor = len(self.results) / counted

                if target_quality_found and bitrate_over:
                    print(
                        f"Found VMAF score >= {TARGET_QUALITY:g}, "
                        "stopping permutations..."
                    )
                    break

        runtime_str = format_dhms(int(time.monotonic() - start))
        log_results_to_file(
            self.results,
            runtime_str,
            self.dup_results,
            self.permutations[0].bitrate,
            False,
            self.log_files_directory,
        )
        print(f"Benchmark runtime: {runtime_str}")

    def add_result(
        self,
        result: PermutationResult,
        is_bitrate_permutation_over: bool,
        is_checking_quality: bool,
        allow_duplicates: bool,
    ) -> None:
        """Keep ``result``, setting it aside if it repeats an earlier score."""
        # duplicates are only tracked during the first bitrate, never for overloads
        if (
            not allow_duplicates
            and is_checking_quality
            and not result.was_overloaded
            and not is_bitrate_permutation_over
        ):
            if result.vmaf_score not in self.vmaf_scores:
                self.results.append(result)
                self.vmaf_scores.add(result.vmaf_score)
            else:
                self.dup_results.append(result)
        else:
            self.results.append(result)


def calc_vmaf_score(
    permutation: Permutation,
    ctrl_channel: CtrlCChannel,
    verbose: bool,
    attempt: int,
    perm_num: int,
) -> float | None:
    """Stream an encode into a VMAF-scoring ffmpeg; return the score or None."""
    ffmpeg_args = FfmpegArgs.build(
        permutation.video_file,
        permutation.encoder,
        permutation.encoder_settings,
        permutation.bitrate,
        permutation.decode_run,
    )

    print(
        "Calculating vmaf score; might take longer than original encode "
        "depending on your CPU..."
    )

    metadata = permutation.load_metadata()
    # the scoring instance listens first for the incoming encode
    vmaf_args = ffmpeg_args.map_to_vmaf(metadata.fps)
    if verbose:
        print(f"V: Vmaf args calculating quality: {vmaf_args}")
    vmaf_child = spawn_ffmpeg_child(vmaf_args, verbose, None)

    encoder_args = FfmpegArgs.build(
        ffmpeg_args.first_input,
        ffmpeg_args.encoder,
        ffmpeg_args.encoder_args,
        ffmpeg_args.bitrate,
        ffmpeg_args.decode,
    )
    encoder_args.output_args = insert_format_from(TCP_OUTPUT, ffmpeg_args.encoder)
    if verbose:
        print(f"V: Encoder fmmpeg args sending to vmaf: {encoder_args}")
    encoder_child = spawn_ffmpeg_child(encoder_args, verbose, None)

    watch_encode_progress(
        metadata.frames,
        False,
        metadata.fps,
        False,
        ffmpeg_args.stats_period,
        ctrl_channel,
    )

    print("VMAF calculation finishing up...")
    vmaf_status = vmaf_child.wait()
    vmaf_log_file = get_latest_ffmpeg_report_file()
    vmaf_score_line = read_last_line_at(3)
    encoder_child.kill()
    encoder_child.wait()

    if vmaf_status == 0:
        try:
            vmaf_score = extract_vmaf_score(vmaf_score_line)
        except ValueError as exc:
            raise QualityCheckError(
                f"Could not parse score from line: {vmaf_score_line}"
            ) from exc
        print(f"VMAF score: {vmaf_score}\n")
        os.remove(vmaf_log_file)
        return vmaf_score

    new_name = (
        f"{vmaf_log_file.with_suffix('').name}"
        f"-perm-{perm_num + 1}-attempt-{attempt + 1}.log"
    )
    kept_log = vmaf_log_file.with_name(new_name)
    vmaf_log_file.rename(kept_log)

    if verbose:
        print(vmaf_score_line if False else _last_line(kept_log))
        print(f"See {new_name} for more details.")

    return None


def _last_line(path) -> str:
    lines = path.read_text(encoding="utf-8", errors="replace").splitlines()
    return lines[-1] if lines else ""


def check_encode_quality(
    permutation: Permutation,
    ctrl_channel: CtrlCChannel,
    verbose: bool,
    perm_num: int,
) -> float:
    """Calculate the VMAF score, retrying up to the attempt limit."""
    for attempt in range(MAX_ATTEMPTS_CALC_QUALITY):
        if verbose:
            print(f"[ ATTEMPT {attempt + 1}/{MAX_ATTEMPTS_CALC_QUALITY} ] ", end="")
        score = calc_vmaf_score(permutation, ctrl_channel, verbose, attempt, perm_num)
        if score is not None:
            return score
        print("Check encode quality failed. Retrying...")

    raise QualityCheckError(
        "Error, Failed to calc encode quality after "
        f"{MAX_ATTEMPTS_CALC_QUALITY} attempts"
    )


def will_be_duplicate(
    duplicates: Sequence[PermutationResult], permutation: Permutation
) -> bool:
    """Return whether ``permutation``'s settings already produced a duplicate score."""
    return any(dup.encoder_settings == permutation.encoder_settings for dup in duplicates)


def insert_format_from(template: str, encoder: str) -> str:
    """Fill the container format for ``encoder`` into ``template``."""
    if "h264" in encoder:
        container = "h264"
    elif "hevc" in encoder:
        container = "hevc"
    else:
        container = "ivf"
    return template.replace("{}", container)