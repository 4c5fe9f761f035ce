import pytest

from encbench.codecs import (
    SUPPORTED_RESOLUTIONS,
    Permute,
    Vendor,
    get_vendor_for_codec,
    map_res_to_bitrate,
)


class _Fixed(Permute):
    def __init__(self, values):
        super().__init__()
        self.values = values

    def init(self):
        return self._load(self.values)

    def get_benchmark_settings(self):
        return "standard"

    @classmethod
    def get_resolution_to_bitrate_map(cls, fps):
        return cls._bitrate_map([1, 2, 3, 4], fps)


@pytest.mark.parametrize(
    "codec, vendor",
    [
        ("h264_nvenc", Vendor.NVIDIA),
        ("hevc_nvenc", Vendor.NVIDIA),
        ("h264_amf", Vendor.AMD),
        ("hevc_amf", Vendor.AMD),
        ("h264_qsv", Vendor.INTEL_QSV),
        ("hevc_qsv", Vendor.INTEL_QSV),
        ("av1_qsv", Vendor.INTEL_QSV),
        ("libx264", Vendor.UNKNOWN),
        ("vp9_qsv", Vendor.UNKNOWN),
    ],
)
def test_vendor_for_codec(codec, vendor):
    assert get_vendor_for_codec(codec) is vendor


def test_map_res_to_bitrate_pairs_in_order():
    values = [5, 6, 7, 8]
    mapping = map_res_to_bitrate(values)
    assert list(mapping) == list(SUPPORTED_RESOLUTIONS)
    assert list(mapping.values()) == values
    assert mapping["1920x1080"] == 6


@pytest.mark.parametrize("values", [[], [1, 2, 3], [1, 2, 3, 4, 5]])
def test_map_res_to_bitrate_wrong_length(values):
    with pytest.raises(ValueError):
        map_res_to_bitrate(values)


def test_permute_is_abstract():
    with pytest.raises(TypeError):
        Permute()


def test_iteration_before_init_is_empty():
    perm = _Fixed(["a", "b"])
    assert list(Permute.__iter__(perm)) == []


def test_iteration_after_init():
    perm = _Fixed(["a", "b", "c"])
    perm.init()
    assert list(Permute.__iter__(perm)) == [(0, "a"), (1, "b"), (2, "c")]
    assert list(Permute.__iter__(perm)) == []


def test_init_resets_iteration():
    perm = _Fixed(["a", "b"])
    perm.init()
    assert Permute.__next__(perm) == (0, "a")
    perm.init()
    assert [s for _, s in Permute.__iter__(perm)] == ["a", "b"]


def test_run_standard_only_yields_benchmark_settings():
    perm = _Fixed(["a", "b"])
    perm.init()
    assert Permute.run_standard_only(perm) == ["standard"]
    assert list(Permute.__iter__(perm)) == [(0, "standard")]


def test_bitrate_map_doubles_only_at_120():
    assert _Fixed.get_resolution_to_bitrate_map(60) == map_res_to_bitrate([1, 2, 3, 4])
    assert _Fixed.get_resolution_to_bitrate_map(30) == map_res_to_bitrate([1, 2, 3, 4])
    assert _Fixed.get_resolution_to_bitrate_map(120) == map_res_to_bitrate([2, 4, 6, 8])