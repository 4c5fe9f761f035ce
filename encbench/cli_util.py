"""Shared command-line helpers: argument checks, pauses and the start-up header."""

from __future__ import annotations

import os
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

from .environment import fail_if_environment_not_setup
from .supported import get_supported_encoders, get_supported_inputs, is_encoder_supported

_CLOSE_MESSAGE = "Press any key to close the program..."
_CONTINUE_MESSAGE = "Press any key to continue..."


class CliError(Exception):
    """A problem with the user's input that ends the program.

    ``ack`` tells whether the user should acknowledge the error before the
    program closes (as when the tool was started without arguments).
    """

    def __init__(self, message: str, ack: bool = False) -> None:
        super().__init__(message)
        self.ack = ack


def is_dev(argv0: str | None = None) -> bool:
    """Return whether the program runs from a development build directory."""
    if argv0 is None:
        argv0 = sys.argv[0]
    return "target" in argv0


def get_video_files(source_file_directory: str) -> list[str]:
    """Return the names of the files in the source directory."""
    if source_file_directory:
        locale = source_file_directory
    elif is_dev():
        locale = "../"
    else:
        locale = "."
    return sorted(entry.name for entry in Path(locale).iterdir() if entry.is_file())


def are_all_source_files_present(source_file_directory: str) -> bool:
    """Return whether every standard benchmark source is in the directory."""
    existing = set(get_video_files(source_file_directory))
    return all(name in existing for name in get_supported_inputs())


def _debug_list(items) -> str:
    return "[" + ", ".join(f'"{item}"' for item in items) + "]"


def standard_cli_check(
    show_encoders: bool,
    encoder: str,
    source_file: str,
    source_files_directory: str,
    was_ui_opened: bool,
) -> None:
    """Validate the options shared by the command-line tools.

    Raises :class:`CliError` for bad input and ``SystemExit(0)`` after
    listing the encoders when ``show_encoders`` is set.
    """
    fail_if_environment_not_setup()

    if show_encoders:
        print(f"Supported encoders: {_debug_list(get_supported_encoders())}")
        _wait_for_key(_CONTINUE_MESSAGE)
        raise SystemExit(0)

    if encoder == "encoder":
        raise CliError(
            "Error: Please provide one of the supported encoders via "
            "'-e encoder_name'; for a list of supported encoders use the '-l' argument",
            ack=was_ui_opened,
        )

    if not is_encoder_supported(encoder):
        raise CliError(
            f"Error: [{encoder}] is not a supported encoder at the moment",
            ack=was_ui_opened,
        )

    effective_file_path = (
        f"{source_files_directory}/{source_file}"
        if source_files_directory
        else source_file
    )
    if source_file and not os.path.exists(effective_file_path):
        raise CliError(
            f"Error: [{effective_file_path}] source file does not exist; if you want "
            "to use one of the provided source files, download them from the "
            "project's readme",
            ack=was_ui_opened,
        )


def _wait_for_key(message: str) -> None:
    try:
        input(message)
    except EOFError:
        print()


def error_with_ack(ack: bool) -> None:
    """End the program with status 1, first letting the user acknowledge it."""
    if ack:
        _wait_for_key(_CLOSE_MESSAGE)
    raise SystemExit(1)


def pause() -> None:
    """Wait for the user before the program closes."""
    _wait_for_key(_CLOSE_MESSAGE)


def _load_version() -> str:
    try:
        return version("encbench")
    except PackageNotFoundError:
        return "unknown"


def log_cli_header(title: str) -> None:
    """Print the tool's title banner and version."""
    print(title)
    print("=" * len(title))
    print()
    print(f"Version: {_load_version()}\n")