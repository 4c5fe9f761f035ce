import pytest

from encbench.metadata import MetaData
from encbench.result import FpsStats, PermutationResult, format_dhms, log_results_to_file

META = MetaData(fps=60, frames=1923, width=1920, height=1080)


def _result(settings="-preset p1", bitrate=10, score=0.0, **kwargs):
    return PermutationResult(
        metadata=META,
        bitrate=bitrate,
        encoder_settings=settings,
        encoder="h264_nvenc",
        vmaf_score=score,
        **kwargs,
    )


def test_format_dhms():
    assert format_dhms(0) == "0s"
    assert format_dhms(59) == "59s"
    assert format_dhms(3661) == "1h1m1s"


def test_format_dhms_omits_zero_parts():
    assert "m" not in format_dhms(3600 + 5)
    assert format_dhms(120).endswith("m")


def test_fps_stats_default():
    stats = FpsStats()
    assert (stats.avg, stats.one_perc_low, stats.ninety_perc) == (0, 0, 0)


def test_str_without_score():
    text = str(_result())
    assert text.startswith("   1920x1080\t60\t10Mb/s")
    assert "\t\t0.00000\t\t" in text
    assert text.endswith("\t\t-preset p1")


def test_str_with_score_and_stats():
    result = _result(score=95.5, fps_stats=FpsStats(avg=140, one_perc_low=120, ninety_perc=150))
    assert str(result).endswith("95.50000\t140\t\t120\t\t150\t\t-preset p1")


def test_str_overloaded_and_decode():
    result = _result(score=88.25, was_overloaded=True, decode_run=True)
    text = str(result)
    assert text.startswith("[O]1920x1080")
    assert "88.25000\t\t" in text
    assert text.endswith("(Decode)")


def test_log_file_for_permutations(tmp_path):
    results = [_result("-preset p1", 10, 95.5), _result("-preset p3", 10, 90.0), _result("-preset p1", 15, 97.0)]
    dups = [_result("-preset p2", 10, 95.5)]
    path = log_results_to_file(results, "1m", dups, 10, False, str(tmp_path))
    assert path.name == "h264_nvenc-1920x1080-60.log"
    content = path.read_text()
    assert content.startswith("Results from entire permutation:\n")
    assert "[Encode Time]" in content
    assert content.count("#" * 10) == 2
    assert "Benchmark runtime: 1m\n\n" in content
    assert "Encoder settings that produced identical scores:" in content
    assert "Identical score: 95.5\n\tEncoded: [-preset p1]\n\tIgnored: [-preset p2]\n" in content
    assert "[-preset p3]" not in content.split("Identical")[1]


def test_log_file_for_benchmark(tmp_path):
    results = [_result(), _result(decode_run=True)]
    path = log_results_to_file(results, "2s", [], 10, True, str(tmp_path))
    assert path.name == "h264_nvenc-benchmark.log"
    content = path.read_text()
    assert "[Encode/Decode Time]" in content
    assert "#" not in content
    assert "identical scores" not in content


def test_log_without_results_raises(tmp_path):
    with pytest.raises(ValueError):
        log_results_to_file([], "0s", [], 10, True, str(tmp_path))