"""Benchmark and permute hardware video encoder settings through ffmpeg.

Includes the ``encoder-benchmark`` and ``encoder-permutor`` commands and the
settings, ffmpeg-argument and result-logging building blocks they use.
"""

__version__ = "0.1.0"