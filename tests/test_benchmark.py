import pytest

from encbench.amf import Amf
from encbench.benchmark import (
    BenchmarkCli,
    get_benchmark_settings_for,
    get_bitrate_for,
    get_input_files,
    is_numeric,
    map_file,
    parse_args,
    read_user_input,
)
from encbench.environment import EnvironmentNotReady
from encbench.metadata import MetaData
from encbench.nvenc import Nvenc
from encbench.qsv import Av1Qsv, Qsv
from encbench.supported import get_supported_encoders, get_supported_inputs


def scripted(*answers):
    remaining = iter(answers)
    return lambda _message: next(remaining)


def test_is_numeric():
    assert is_numeric("123")
    assert not is_numeric("12a")
    assert not is_numeric("-1")


def test_map_file_variants():
    assert map_file(False, "videos", "1080-60.y4m") == "videos/1080-60.y4m"
    assert map_file(True, "videos", "1080-60.y4m") == "videos/1080-60.y4m"
    assert map_file(True, "", "1080-60.y4m") == "../1080-60.y4m"
    assert map_file(False, "", "1080-60.y4m") == "1080-60.y4m"


def test_get_input_files_single_source():
    assert get_input_files("4k-60.y4m", "videos") == ["4k-60.y4m"]


def test_get_input_files_all_standard_sources():
    files = get_input_files("", "videos")
    assert files == [f"videos/{name}" for name in get_supported_inputs()]


@pytest.mark.parametrize(
    ("encoder", "expected"),
    [
        ("h264_nvenc", lambda: Nvenc(False, 1).get_benchmark_settings()),
        ("hevc_nvenc", lambda: Nvenc(True, 1).get_benchmark_settings()),
        ("h264_amf", lambda: Amf(False, 1).get_benchmark_settings()),
        ("hevc_amf", lambda: Amf(True, 1).get_benchmark_settings()),
        ("h264_qsv", lambda: Qsv(False).get_benchmark_settings()),
        ("hevc_qsv", lambda: Qsv(True).get_benchmark_settings()),
        ("av1_qsv", lambda: Av1Qsv().get_benchmark_settings()),
    ],
)
def test_benchmark_settings_per_encoder(encoder, expected):
    cli = BenchmarkCli(encoder=encoder, gpu=1)
    assert get_benchmark_settings_for(cli) == expected()


def test_benchmark_settings_unknown_encoder_is_empty():
    assert get_benchmark_settings_for(BenchmarkCli(encoder="libx264")) == ""


def test_bitrate_for_nvenc_and_others():
    metadata = MetaData(fps=60, frames=100, width=1920, height=1080)
    assert get_bitrate_for(metadata, "h264_nvenc") == (
        Nvenc.get_resolution_to_bitrate_map(60)["1920x1080"]
    )
    assert get_bitrate_for(metadata, "hevc_qsv") == (
        Amf.get_resolution_to_bitrate_map(60)["1920x1080"]
    )


def test_bitrate_doubles_at_120_fps():
    at_60 = get_bitrate_for(MetaData(fps=60, frames=1, width=3840, height=2160), "h264_nvenc")
    at_120 = get_bitrate_for(MetaData(fps=120, frames=1, width=3840, height=2160), "h264_nvenc")
    assert at_120 == 2 * at_60


def test_bitrate_for_unsupported_resolution():
    with pytest.raises(ValueError):
        get_bitrate_for(MetaData(fps=60, frames=1, width=640, height=480), "h264_amf")


def test_parse_args_defaults():
    cli = parse_args([])
    assert cli.encoder == "encoder"
    assert cli.source_file == ""
    assert cli.gpu == 0
    assert not cli.decode
    assert not cli.was_ui_opened


def test_parse_args_values():
    cli = parse_args(["-e", "hevc_amf", "-g", "1", "-d", "-v", "-s", "4k-60.y4m"])
    assert cli.encoder == "hevc_amf"
    assert cli.gpu == 1
    assert cli.decode
    assert cli.verbose
    assert cli.source_file == "4k-60.y4m"


def test_parse_args_rejects_out_of_range_gpu():
    with pytest.raises(SystemExit):
        parse_args(["-g", "300"])


def test_read_user_input_basic(capsys):
    cli = BenchmarkCli()
    read_user_input(cli, [], scripted("0", "y", "n", "y", "2", "n"))
    assert cli.encoder == get_supported_encoders()[0]
    assert cli.decode
    assert cli.source_file == get_supported_inputs()[2]
    assert cli.files_directory == ""
    assert not cli.verbose


def test_read_user_input_retries_invalid_answers(capsys):
    cli = BenchmarkCli()
    read_user_input(
        cli,
        [],
        scripted("x", "99", "1", "maybe", "n", "y", "y", "y"),
    )
    assert cli.encoder == get_supported_encoders()[1]
    assert not cli.decode
    assert cli.source_file == ""
    assert cli.verbose
    assert capsys.readouterr().out.count("Invalid input, try again...") == 3


def test_read_user_input_gpu_and_directory(tmp_path, capsys):
    cli = BenchmarkCli()
    missing = str(tmp_path / "missing")
    read_user_input(
        cli,
        ["GPU A", "GPU B"],
        scripted("5", "1", "3", "n", "y", "n", missing, str(tmp_path), "n"),
    )
    assert cli.gpu == 1
    assert cli.encoder == get_supported_encoders()[3]
    assert cli.files_directory == str(tmp_path)
    assert cli.source_file == ""
    assert "does not exist" in capsys.readouterr().out


def test_validate_fails_without_ffmpeg(monkeypatch, tmp_path):
    monkeypatch.setenv("PATH", str(tmp_path))
    cli = BenchmarkCli(encoder="h264_nvenc", source_file="1080-60.y4m")
    with pytest.raises(EnvironmentNotReady):
        cli.validate()