import socket
import threading
import time

from encbench.progressbar import (
    TrialResult,
    draw_yellow_bar,
    make_bar,
    watch_encode_progress,
)
from encbench.stat_listener import LOCALHOST, PORT
from encbench.threads import CtrlCChannel


def test_trial_result_defaults():
    result = TrialResult()
    assert result.all_fps == []
    assert result.was_overloaded is False
    assert result.ffmpeg_error is False


def test_trial_results_do_not_share_samples():
    first = TrialResult()
    second = TrialResult()
    first.all_fps.append(60)
    assert second.all_fps == []


def test_make_bar_total_and_colour():
    bar = make_bar(50, "green")
    try:
        assert bar.total == 50
        assert bar.colour == "green"
        assert bar.n == 0
    finally:
        bar.close()


def test_draw_yellow_bar_is_left_empty():
    bar = draw_yellow_bar(10)
    assert bar.colour == "yellow"
    assert bar.total == 10
    assert bar.n == 0


def _feed(lines):
    deadline = time.monotonic() + 5
    while True:
        try:
            conn = socket.create_connection((LOCALHOST, PORT), timeout=1)
            break
        except OSError:
            if time.monotonic() > deadline:
                return
            time.sleep(0.05)
    with conn:
        for line in lines:
            conn.sendall(line.encode())
            time.sleep(0.05)
        time.sleep(1)


def test_watch_encode_progress_completes():
    lines = ["frame=50\n", "fps=0.0\n", "frame=100\n"]
    feeder = threading.Thread(target=_feed, args=(lines,), daemon=True)
    feeder.start()

    result = watch_encode_progress(100, False, 4, False, 0.5, CtrlCChannel())
    feeder.join(timeout=5)

    assert result.was_overloaded is False
    assert result.ffmpeg_error is False
    assert len(result.all_fps) > 0
    assert all(fps >= 1 for fps in result.all_fps)