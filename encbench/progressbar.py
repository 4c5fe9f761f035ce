"""Following an encode's progress and collecting its frame rate samples."""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from tqdm import tqdm

from .stat_listener import FrameCounter, start_listening_to_ffmpeg_stats
from .threads import CtrlCChannel

_BAR_FORMAT = (
    "[{elapsed}] [{bar}] {n_fmt}/{total_fmt} frames ({remaining})"
)
# empty, head, filled
_PROGRESS_CHARS = "->#"

# how long the encoder may stay below the target fps before it counts as overloaded
_OVERLOAD_TIME = 5.0
# how long ffmpeg may go without progress before it counts as an error
_ALLOWED_FFMPEG_DOWNTIME = 10.0
_VERBOSE_LOG_INTERVAL = 1.0
_POLL_INTERVAL = 0.01


@dataclass
class TrialResult:
    """Frame rate samples and the outcome of one watched encode."""

    all_fps: list[int] = field(default_factory=list)
    was_overloaded: bool = False
    ffmpeg_error: bool = False


def make_bar(total_frames: int, color: str) -> tqdm:
    """Create a progress bar over ``total_frames`` drawn in ``color``."""
    return tqdm(
        total=total_frames,
        colour=color,
        bar_format=_BAR_FORMAT,
        ascii=_PROGRESS_CHARS,
    )


def draw_yellow_bar(total_frames: int) -> tqdm:
    """Draw an empty yellow bar, as shown for a skipped permutation."""
    bar = make_bar(total_frames, "yellow")
    bar.refresh()
    bar.close()
    return bar


def _set_position(bar: tqdm, position: int) -> None:
    bar.update(position - bar.n)


def watch_encode_progress(
    total_frames: int,
    detect_overload: bool,
    target_fps: int,
    verbose: bool,
    stats_period: float,
    ctrl_channel: CtrlCChannel,
) -> TrialResult:
    """Follow ffmpeg's progress until the encode ends, stalls or is overloaded."""
    trial_result = TrialResult()
    counter = FrameCounter()

    bar = make_bar(total_frames, "green")
    bar.refresh()

    # frame stats arrive every stats_period seconds; scale the difference to fps
    interval_adjustment = int(1.0 / stats_period)
    record_threshold = target_fps // 4

    listener = start_listening_to_ffmpeg_stats(verbose, counter)

    can_log_verbose = True
    log_verbose_timer = time.monotonic()
    checking_overload = False
    first_overload_detected = time.monotonic()
    checking_ffmpeg_error = False
    ffmpeg_error_check_time = time.monotonic()
    last_frame = 0

    try:
        while True:
            if time.monotonic() - log_verbose_timer > _VERBOSE_LOG_INTERVAL:
                log_verbose_timer = time.monotonic()
                can_log_verbose = True

            ctrl_channel.exit_on_ctrl_c()

            frame = counter.frame
            calculated_fps = (frame - counter.previous_frame) * interval_adjustment

            if verbose and can_log_verbose:
                print(f"V: Calculated fps: {calculated_fps}")

            # anything below a quarter of the target is noise
            if calculated_fps >= record_threshold:
                trial_result.all_fps.append(calculated_fps)

            if detect_overload and calculated_fps < target_fps:
                if not checking_overload:
                    first_overload_detected = time.monotonic()
                    checking_overload = True
                if time.monotonic() - first_overload_detected > _OVERLOAD_TIME:
                    break
            else:
                checking_overload = False

            if frame >= total_frames:
                _set_position(bar, total_frames)
                break

            _set_position(bar, frame)

            if frame != last_frame:
                last_frame = frame
                checking_ffmpeg_error = False
            else:
                if not checking_ffmpeg_error:
                    ffmpeg_error_check_time = time.monotonic()
                    checking_ffmpeg_error = True
                if time.monotonic() - ffmpeg_error_check_time > _ALLOWED_FFMPEG_DOWNTIME:
                    trial_result.ffmpeg_error = True
                    break

            can_log_verbose = False
            time.sleep(_POLL_INTERVAL)

        if counter.frame < total_frames:
            bar.colour = "red"
            bar.refresh()
        else:
            _set_position(bar, total_frames)
        bar.close()
        print()
    finally:
        listener.stop()

    trial_result.was_overloaded = counter.frame != total_frames
    counter.reset()
    return trial_result