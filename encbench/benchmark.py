"""The benchmark tool: runs the standard encode benchmark for one encoder."""

from __future__ import annotations

import argparse
import os
import sys
import traceback
from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace

from .amf import Amf
from .benchmark_engine import BenchmarkEngine
from .cli_util import (
    CliError,
    are_all_source_files_present,
    error_with_ack,
    log_cli_header,
    pause,
    standard_cli_check,
)
from .cli_util import is_dev as _is_dev_build
from .codecs import Vendor, get_vendor_for_codec
from .environment import EnvironmentNotReady
from .gpus import get_gpus
from .metadata import MetaData
from .nvenc import Nvenc
from .permutation import Permutation
from .qsv import Av1Qsv, Qsv
from .supported import get_supported_encoders, get_supported_inputs

_INVALID = "Invalid input, try again..."


@dataclass
class BenchmarkCli:
    """Options of the benchmark tool."""

    list_supported_encoders: bool = False
    encoder: str = ""
    source_file: str = ""
    files_directory: str = ""
    log_output_directory: str = ""
    verbose: bool = False
    gpu: int = 0
    decode: bool = False
    # set when the options were collected interactively
    was_ui_opened: bool = False

    def validate(self) -> None:
        """Check the options; raise :class:`CliError` on bad input."""
        standard_cli_check(
            self.list_supported_encoders,
            self.encoder,
            self.source_file,
            self.files_directory,
            self.was_ui_opened,
        )

        # without a source file every standard source is run
        if not self.source_file and not are_all_source_files_present(
            self.files_directory
        ):
            expected = ", ".join(f'"{name}"' for name in get_supported_inputs())
            raise CliError(
                "You're missing some video source files to run the standard "
                f"benchmark; you should have the following: \n[{expected}]\n"
                "Please download the ones you are missing from the project's "
                "readme section\n"
                "If you want to run the tool against a specific resolution/fps, "
                "download just that source file and specify it with '-s'",
                ack=self.was_ui_opened,
            )

        if self.source_file and self.files_directory:
            # the source file is relative to the files directory
            self.source_file = f"{self.files_directory}/{self.source_file}"


def _gpu_index(text: str) -> int:
    value = int(text)
    if not 0 <= value <= 255:
        raise argparse.ArgumentTypeError("gpu must be between 0 and 255")
    return value


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="encbench-benchmark")
    parser.add_argument(
        "-l", "--list-supported-encoders", action="store_true",
        help="lists the encoders that this tool supports",
    )
    parser.add_argument(
        "-e", "--encoder", default="encoder", metavar="encoder_name",
        help="the encoder you wish to benchmark: [h264_nvenc, hevc_nvenc, etc]",
    )
    parser.add_argument(
        "-s", "--source-file", default="", metavar="source.y4m",
        help="the source file to benchmark; if not given, all standard sources are run",
    )
    parser.add_argument(
        "-f", "--files-directory", default="", metavar="folder/to/files",
        help="the directory to look for the source files in",
    )
    parser.add_argument(
        "--log-output-directory", default="", metavar="folder/to/log/output",
        help="the directory for the logs; defaults to the current directory",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="logs useful information to help troubleshooting",
    )
    parser.add_argument(
        "-g", "--gpu", type=_gpu_index, default=0,
        help="the GPU to run the encode on; defaults to the first one",
    )
    parser.add_argument(
        "-d", "--decode", action="store_true",
        help="run a decode benchmark as well; needs more storage space",
    )
    parser.add_argument(
        "-w", "--was-ui-opened", action="store_true", help=argparse.SUPPRESS
    )
    return parser


def parse_args(argv: Sequence[str] | None = None) -> BenchmarkCli:
    """Parse command-line arguments into a :class:`BenchmarkCli`."""
    namespace = _parser().parse_args(argv)
    return BenchmarkCli(**vars(namespace))


def _print_options(options: Sequence[str]) -> None:
    for index, option in enumerate(options):
        print(f"[{index}] - {option}")


def _choose_index(
    options: Sequence[str], message: str, prompt: Callable[[str], str]
) -> int:
    while True:
        _print_options(options)
        answer = prompt(message).strip()
        if is_numeric(answer):
            try:
                value = int(answer)
            except ValueError:
                value = -1
            if 0 <= value < len(options):
                return value
        print(_INVALID)


def _ask_yes_no(message: str, prompt: Callable[[str], str]) -> bool:
    while True:
        answer = prompt(message).strip()
        if answer in ("y", "n"):
            return answer == "y"
        print(_INVALID)


def read_user_input(
    cli: BenchmarkCli,
    gpus: Sequence[str],
    prompt: Callable[[str], str] = input,
) -> None:
    """Fill ``cli`` from answers to interactive questions."""
    if len(gpus) > 1:
        cli.gpu = _choose_index(gpus, f"Choose GPU [0-{len(gpus) - 1}]: ", prompt)
        print()

    encoders = get_supported_encoders()
    cli.encoder = encoders[
        _choose_index(encoders, f"Choose encoder [0-{len(encoders) - 1}]: ", prompt)
    ]

    if _ask_yes_no("\nRun decode benchmark along with encode benchmark? [y/n]: ", prompt):
        cli.decode = True

    full_bench = _ask_yes_no("\nRun full benchmark? [y/n]: ", prompt)

    # an answer other than y/n is taken as "not in the current directory"
    answer = prompt("\nAre the source files in the current directory? [y/n]: ").strip()
    if answer not in ("y", "n"):
        print(_INVALID)
    in_current_dir = answer == "y"

    if not in_current_dir:
        while True:
            directory = prompt("\nPlease specify the input source file directory: ").strip()
            if os.path.exists(directory):
                cli.files_directory = directory
                break
            print(
                "The provided directory does not exist, please check your input "
                "and try again..."
            )

    if not full_bench:
        inputs = get_supported_inputs()
        cli.source_file = inputs[
            _choose_index(
                inputs, f"\nChoose video file to encode [0-{len(inputs) - 1}]: ", prompt
            )
        ]

    if _ask_yes_no("\nRun with verbose mode? [y/n]: ", prompt):
        cli.verbose = True

    print()


def is_numeric(text: str) -> bool:
    """Return whether every character of ``text`` is numeric."""
    return all(char.isnumeric() for char in text)


def get_benchmark_settings_for(cli: BenchmarkCli) -> str:
    """Return the standard benchmark settings for the chosen encoder."""
    vendor = get_vendor_for_codec(cli.encoder)
    if vendor is Vendor.NVIDIA:
        return Nvenc(cli.encoder == "hevc_nvenc", cli.gpu).get_benchmark_settings()
    if vendor is Vendor.AMD:
        return Amf(cli.encoder == "hevc_amf", cli.gpu).get_benchmark_settings()
    if vendor is Vendor.INTEL_QSV:
        if "av1" in cli.encoder:
            return Av1Qsv().get_benchmark_settings()
        return Qsv(cli.encoder == "hevc_qsv").get_benchmark_settings()
    return ""


def get_bitrate_for(metadata: MetaData, encoder: str) -> int:
    """Return the bitrate (Mb/s) to benchmark ``metadata``'s source at."""
    if "nvenc" in encoder:
        bitrates = Nvenc.get_resolution_to_bitrate_map(metadata.fps)
    else:
        bitrates = Amf.get_resolution_to_bitrate_map(metadata.fps)
    resolution = metadata.resolution()
    try:
        return bitrates[resolution]
    except KeyError:
        raise ValueError(f"unsupported resolution: {resolution}") from None


def get_input_files(source_file: str, source_files_directory: str) -> list[str]:
    """Return the files to benchmark: the given one, or every standard source."""
    if not source_file:
        dev = _is_dev_build()
        return [
            map_file(dev, source_files_directory, name)
            for name in get_supported_inputs()
        ]
    return [source_file]


def map_file(is_dev: bool, source_files_directory: str, name: str) -> str:
    """Return the path of the standard source ``name``."""
    if source_files_directory:
        return f"{source_files_directory}/{name}"
    if is_dev:
        return f"../{name}"
    return name


def _benchmark(argv: Sequence[str]) -> None:
    log_cli_header("Encoder Benchmark")
    gpus = get_gpus()

    if not argv:
        cli = BenchmarkCli()
        read_user_input(cli, gpus)
        cli.was_ui_opened = True
    else:
        cli = parse_args(argv)

    try:
        cli.validate()
    except EnvironmentNotReady as exc:
        print(exc)
        raise SystemExit(1) from exc
    except CliError as exc:
        print(exc)
        error_with_ack(exc.ack)

    engine = BenchmarkEngine(cli.log_output_directory)
    for input_file in get_input_files(cli.source_file, cli.files_directory):
        permutation = Permutation(input_file, cli.encoder)
        settings = get_benchmark_settings_for(cli)
        permutation.bitrate = get_bitrate_for(permutation.load_metadata(), cli.encoder)
        permutation.encoder_settings = settings
        permutation.verbose = cli.verbose
        # the encode output is kept for the decode run
        if cli.decode:
            permutation.is_decoding = True

        engine.add(replace(permutation))
        if cli.decode:
            engine.add(replace(permutation, decode_run=True))

    engine.run()
    pause()


def main(argv: Sequence[str] | None = None) -> None:
    """Run the benchmark tool; asks interactively when given no arguments."""
    if argv is None:
        argv = sys.argv[1:]
    try:
        _benchmark(list(argv))
    except Exception:
        traceback.print_exc()
        print("Unhandled error encountered, see errors above...", file=sys.stderr)
    pause()