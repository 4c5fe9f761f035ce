"""Encoders and standard source files supported by the benchmark tools."""

_CODEC_FAMILIES = ("nvenc", "amf", "qsv")
_CODECS = ("h264", "hevc")
_RESOLUTION_LABELS = ("720", "1080", "2k", "4k")
_FRAME_RATES = (60, 120)

SUPPORTED_ENCODERS: tuple[str, ...] = tuple(
    f"{codec}_{family}" for family in _CODEC_FAMILIES for codec in _CODECS
) + ("av1_qsv",)

ENCODE_FILES: tuple[str, ...] = tuple(
    f"{label}-{fps}.y4m" for label in _RESOLUTION_LABELS for fps in _FRAME_RATES
)


def is_encoder_supported(encoder: str) -> bool:
    """Return whether ``encoder`` is one of the supported encoder names."""
    return encoder in SUPPORTED_ENCODERS


def get_supported_encoders() -> tuple[str, ...]:
    """Return the supported encoder names, in menu order."""
    return SUPPORTED_ENCODERS


def get_supported_inputs() -> tuple[str, ...]:
    """Return the file names of the standard benchmark sources."""
    return ENCODE_FILES