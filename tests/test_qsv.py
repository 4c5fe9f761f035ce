from encbench.codecs import SUPPORTED_RESOLUTIONS
from encbench.qsv import Av1Qsv, Qsv


def test_qsv_profiles():
    assert "mainsp" in Qsv(True).profiles
    assert "baseline" in Qsv(False).profiles
    assert "baseline" not in Qsv(True).profiles


def test_qsv_permutation_count():
    qsv = Qsv(False)
    perms = qsv.init()
    assert len(perms) == len(qsv.presets) * len(qsv.profiles)
    assert len(set(perms)) == len(perms)


def test_qsv_first_permutation():
    qsv = Qsv(True)
    qsv.init()
    assert next(qsv) == (0, "-preset veryfast -profile:v unknown")


def test_qsv_init_twice_not_double():
    qsv = Qsv(True)
    first = list(qsv.init())
    assert qsv.init() == first
    assert [s for _, s in qsv] == first


def test_qsv_benchmark_settings():
    qsv = Qsv(False)
    assert qsv.get_benchmark_settings() == "-preset faster -profile main"
    assert qsv.run_standard_only() == ["-preset faster -profile main"]


def test_av1_permutations():
    av1 = Av1Qsv()
    perms = av1.init()
    assert len(perms) == len(av1.presets) * len(av1.profiles) * len(av1.async_depth)
    assert all(p.endswith("-async_depth 4") for p in perms)
    assert perms[0] == "-preset veryfast -profile:v main -async_depth 4"


def test_av1_benchmark_settings():
    av1 = Av1Qsv()
    assert av1.get_benchmark_settings() == "-preset veryfast -profile:v main"
    av1.init()
    assert av1.run_standard_only() == [av1.get_benchmark_settings()]
    assert len(list(av1)) == 1


def test_av1_iteration_before_init_is_empty():
    assert list(Av1Qsv()) == []


def test_bitrate_maps():
    qsv_sixty = Qsv.get_resolution_to_bitrate_map(60)
    assert qsv_sixty["3840x2160"] == 70
    assert Av1Qsv.get_resolution_to_bitrate_map(60) == qsv_sixty
    doubled = Qsv.get_resolution_to_bitrate_map(120)
    assert all(doubled[r] == 2 * qsv_sixty[r] for r in SUPPORTED_RESOLUTIONS)