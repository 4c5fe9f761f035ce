import pytest

from encbench.supported import (
    get_supported_encoders,
    get_supported_inputs,
    is_encoder_supported,
)


@pytest.mark.parametrize("encoder", list(get_supported_encoders()))
def test_every_listed_encoder_is_supported(encoder):
    assert is_encoder_supported(encoder) is True


@pytest.mark.parametrize("encoder", ["encoder", "", "libx264", "H264_NVENC", "nvenc"])
def test_unknown_encoders_are_rejected(encoder):
    assert is_encoder_supported(encoder) is False


def test_encoder_order_starts_with_nvenc():
    encoders = get_supported_encoders()
    assert encoders[0] == "h264_nvenc"
    assert encoders[-1] == "av1_qsv"
    assert len(set(encoders)) == len(encoders)


def test_inputs_are_y4m_files():
    inputs = get_supported_inputs()
    assert all(name.endswith(".y4m") for name in inputs)
    assert len(set(inputs)) == len(inputs)


def test_inputs_order():
    inputs = get_supported_inputs()
    assert inputs[0] == "720-60.y4m"
    assert inputs[-1] == "4k-120.y4m"
    assert "1080-60.y4m" in inputs