"""The permutation tool: tries every settings combination for an encoder."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from dataclasses import dataclass

from .amf import Amf
from .cli_util import CliError, error_with_ack, log_cli_header, standard_cli_check
from .codecs import Permute, Vendor, get_vendor_for_codec
from .environment import EnvironmentNotReady
from .nvenc import Nvenc
from .permutation import Permutation
from .permutation_engine import PermutationEngine
from .qsv import Av1Qsv, Qsv

_BITRATE_INTERVAL = 5


@dataclass
class PermutorCli:
    """Options of the permutation tool."""

    encoder: str = "encoder"
    bitrate: int = 10
    check_quality: bool = False
    allow_duplicate_scores: bool = False
    detect_overload: bool = False
    source_file: str = ""
    files_directory: str = ""
    log_output_directory: str = ""
    test_run: bool = False
    max_bitrate_permutation: int | None = None
    verbose: bool = False
    list_supported_encoders: bool = False
    gpu: int = 0

    def validate(self) -> None:
        """Check the options; raise :class:`CliError` on bad input."""
        standard_cli_check(
            self.list_supported_encoders,
            self.encoder,
            self.source_file,
            self.files_directory,
            False,
        )
        if not self.source_file:
            raise CliError(
                "Error: No source file was provided to run on, please specify an input file"
            )
        if self.max_bitrate_permutation is None:
            self.max_bitrate_permutation = self.bitrate

    def has_special_options(self) -> bool:
        """Return whether any option worth announcing is switched on."""
        return (
            self.check_quality
            or self.detect_overload
            or self.verbose
            or self.test_run
            or self.allow_duplicate_scores
        )


def _gpu_index(text: str) -> int:
    value = int(text)
    if not 0 <= value <= 255:
        raise argparse.ArgumentTypeError("gpu must be between 0 and 255")
    return value


def _non_negative(text: str) -> int:
    value = int(text)
    if value < 0:
        raise argparse.ArgumentTypeError("bitrate must not be negative")
    return value


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="encbench-permutor")
    parser.add_argument(
        "-e", "--encoder", default="encoder", metavar="encoder_name",
        help="the encoder you wish to benchmark: [h264_nvenc, hevc_nvenc, etc]",
    )
    parser.add_argument(
        "-b", "--bitrate", type=_non_negative, default=10, metavar="bitrate",
        help="target bitrate (in Mb/s); the starting value when permuting bitrates",
    )
    parser.add_argument(
        "-c", "--check-quality", action="store_true",
        help="whether to run vmaf score on each permutation or not",
    )
    parser.add_argument(
        "-a", "--allow-duplicate-scores", action="store_true",
        help="with --check-quality, still encode settings that repeat a score",
    )
    parser.add_argument(
        "-d", "--detect-overload", action="store_true",
        help="stop an encode if the encoder can't keep up with the source fps",
    )
    parser.add_argument(
        "-s", "--source-file", default="", metavar="source.y4m",
        help="the source file you wish to run on",
    )
    parser.add_argument(
        "-f", "--files-directory", default="", metavar="folder/to/files",
        help="the directory to look for the source file in",
    )
    parser.add_argument(
        "--log-output-directory", default="", metavar="folder/to/log/output",
        help="the directory for the logs; defaults to the current directory",
    )
    parser.add_argument(
        "-t", "--test-run", action="store_true",
        help="run just the first permutation for the encoder",
    )
    parser.add_argument(
        "-m", "--max-bitrate-permutation", type=_non_negative, default=None,
        metavar="bitrate",
        help="maximum bitrate to permute up to, in 5Mb/s steps",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="logs useful information to help troubleshooting",
    )
    parser.add_argument(
        "-l", "--list-supported-encoders", action="store_true",
        help="lists the encoders that this tool supports",
    )
    parser.add_argument(
        "-g", "--gpu", type=_gpu_index, default=0,
        help="the GPU to run the encode on; defaults to the first one",
    )
    return parser


def parse_args(argv: Sequence[str] | None = None) -> PermutorCli:
    """Parse command-line arguments into a :class:`PermutorCli`."""
    namespace = _parser().parse_args(argv)
    return PermutorCli(**vars(namespace))


def log_special_arguments(cli: PermutorCli) -> None:
    """Print which of the special options are on."""
    if not cli.has_special_options():
        return
    print("\nOptions:")
    if cli.detect_overload:
        print("  -encoding will stop if overload detected")
    if cli.check_quality:
        print("  -calculating vmaf score")
    if cli.allow_duplicate_scores:
        print("  -ignoring whether expected vmaf score will be duplicated")
    if cli.verbose:
        print("  -verbose enabled")
    if cli.test_run:
        print("  -test run, will only run 1 permutation")


def _settings_for(cli: PermutorCli) -> Permute | None:
    vendor = get_vendor_for_codec(cli.encoder)
    if vendor is Vendor.NVIDIA:
        return Nvenc(cli.encoder == "hevc_nvenc", cli.gpu)
    if vendor is Vendor.AMD:
        return Amf(cli.encoder == "hevc_amf", cli.gpu)
    if vendor is Vendor.INTEL_QSV:
        return Av1Qsv() if "av1" in cli.encoder else Qsv(cli.encoder == "hevc_qsv")
    return None


def build_setting_permutations(
    engine: PermutationEngine, cli: PermutorCli, bitrate: int
) -> None:
    """Queue a permutation on ``engine`` for every settings combination at ``bitrate``."""
    settings = _settings_for(cli)
    if settings is None:
        return
    settings.init()
    for _, encoder_settings in settings:
        engine.add(
            Permutation(
                video_file=cli.source_file,
                encoder=cli.encoder,
                encoder_settings=encoder_settings,
                bitrate=bitrate,
                check_quality=cli.check_quality,
                verbose=cli.verbose,
                detect_overload=cli.detect_overload,
                allow_duplicates=cli.allow_duplicate_scores,
            )
        )
        if cli.test_run:
            break


def get_bitrate_permutations(starting_bitrate: int, max_bitrate: int) -> list[int]:
    """Return the bitrates from the start up to the maximum in 5Mb/s steps."""
    if max_bitrate < starting_bitrate:
        raise ValueError("the maximum bitrate is below the starting bitrate")
    return list(range(starting_bitrate, max_bitrate + 1, _BITRATE_INTERVAL))


def main(argv: Sequence[str] | None = None) -> None:
    """Run the permutation tool."""
    log_cli_header("Permutation Tool")
    cli = parse_args(argv)
    try:
        cli.validate()
    except EnvironmentNotReady as exc:
        print(exc)
        raise SystemExit(1) from exc
    except CliError as exc:
        print(exc)
        error_with_ack(exc.ack)

    log_special_arguments(cli)

    engine = PermutationEngine(cli.log_output_directory)
    assert cli.max_bitrate_permutation is not None
    for bitrate in get_bitrate_permutations(cli.bitrate, cli.max_bitrate_permutation):
        build_setting_permutations(engine, cli, bitrate)

    engine.run()