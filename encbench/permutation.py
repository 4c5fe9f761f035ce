"""One encode (or decode) run to be performed by an engine."""

from __future__ import annotations

from dataclasses import dataclass, field

from .ffprobe import probe_for_video_metadata
from .metadata import MetaData


@dataclass
class Permutation:
    """A source file, encoder and settings combination to run."""

    video_file: str
    encoder: str
    encoder_settings: str = ""
    bitrate: int = 0
    metadata: MetaData = field(default_factory=MetaData)
    check_quality: bool = False
    allow_duplicates: bool = False
    detect_overload: bool = False
    verbose: bool = False
    # whether this permutation is the decode run
    decode_run: bool = False
    # whether any decoding is done at all
    is_decoding: bool = False

    def load_metadata(self) -> MetaData:
        """Return the source metadata, probing the file the first time."""
        if self.metadata.is_empty():
            self.metadata = probe_for_video_metadata(self.video_file)
        return self.metadata