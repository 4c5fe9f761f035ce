import pytest

from encbench.benchmark_engine import BenchmarkEngine
from encbench.permutation import Permutation


def test_new_engine_is_empty():
    engine = BenchmarkEngine("logs")
    assert engine.permutations == []
    assert engine.results == []
    assert engine.log_files_directory == "logs"


def test_add_keeps_order():
    engine = BenchmarkEngine("")
    first = Permutation("720-60.y4m", "h264_nvenc")
    second = Permutation("1080-60.y4m", "h264_nvenc")
    engine.add(first)
    engine.add(second)
    assert engine.permutations == [first, second]
    assert engine.permutations[0] is first


def test_run_without_permutations():
    engine = BenchmarkEngine("")
    with pytest.raises(ValueError):
        engine.run()
    assert engine.results == []