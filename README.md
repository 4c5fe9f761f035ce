# encbench

Measure how fast your GPU's hardware video encoder runs. encbench starts
`ffmpeg` on raw `.y4m` clips, follows its progress and records the frames per
second the encoder reaches (average, 1st and 90th percentile). A second tool
tries every encoder setting combination over a range of bitrates and can
score each encode with VMAF.

## Requirements

- Python 3.10 or newer
- `ffmpeg` and `ffprobe` on your `PATH`; both are checked before a run starts.
  VMAF scoring needs an ffmpeg build that includes `libvmaf`.
- The standard source clips: `720-60.y4m`, `720-120.y4m`, `1080-60.y4m`,
  `1080-120.y4m`, `2k-60.y4m`, `2k-120.y4m`, `4k-60.y4m`, `4k-120.y4m`
- Local TCP ports 1234 (ffmpeg progress) and, for VMAF scoring, 2000 must be
  free.

## Installation

```
pip install .
```

## Supported encoders

`h264_nvenc`, `hevc_nvenc`, `h264_amf`, `hevc_amf`, `h264_qsv`, `hevc_qsv`,
`av1_qsv`

## Benchmark

With no arguments the tool asks for each setting in turn: the GPU (when more
than one NVIDIA GPU is found), the encoder, whether to run the decode
benchmark, whether to run all clips, where the clips are, which clip to use
and whether to be verbose.

```
encoder-benchmark
```

Or pass the settings as arguments:

```
encoder-benchmark -e hevc_nvenc                 # every standard clip
encoder-benchmark -e h264_amf -s 1080-60.y4m    # a single clip
encoder-benchmark -e h264_qsv -f /videos -d     # clips in /videos, with decode run
```

Options:

- `-e/--encoder` the encoder to benchmark
- `-s/--source-file` a single clip; without it all standard clips must be
  present and are run
- `-f/--files-directory` the directory holding the clips
- `--log-output-directory` where the log file goes (default: current directory)
- `-g/--gpu` GPU index, 0–255 (default 0)
- `-d/--decode` after each encode, keep its output as an `.mp4` and run a
  hardware decode of it, then delete the file
- `-v/--verbose` print the ffmpeg command lines and per-second fps
- `-l/--list-supported-encoders` list the encoders and exit

The bitrate is chosen from the clip's resolution and frame rate. Results are
written to `<encoder>-benchmark.log`.

## Permutations

```
encoder-permutor -e h264_nvenc -s 1080-60.y4m -b 10 -m 30 -c
```

This queues every setting combination for the encoder at each bitrate from
`-b` (default 10) up to `-m` Mb/s in steps of 5; without `-m` only the
starting bitrate is used. Other options:

- `-c/--check-quality` score each encode with VMAF. Runs stop at the end of
  the first bitrate at which a score reaches 95.
- `-a/--allow-duplicate-scores` with `-c`, settings whose score repeated an
  earlier one at the first bitrate are normally skipped at later bitrates;
  this option runs them anyway
- `-d/--detect-overload` stop an encode when the encoder stays below the
  clip's frame rate for five seconds
- `-t/--test-run` queue only one setting combination per bitrate
- `-f/--files-directory`, `--log-output-directory`, `-g/--gpu`,
  `-v/--verbose`, `-l/--list-supported-encoders` as above

A source file is required. Results are written to
`<encoder>-<resolution>-<fps>.log`, with a section listing settings that
produced identical scores.

## Library use

```python
from encbench.nvenc import Nvenc
from encbench.args import FfmpegArgs

nvenc = Nvenc(is_hevc=False, gpu=0)
nvenc.init()
for index, settings in nvenc:
    print(index, settings)

args = FfmpegArgs.build("1080-60.y4m", "h264_nvenc", nvenc.get_benchmark_settings(), 20, False)
print(args.to_list())
```

`Amf`, `Qsv` and `Av1Qsv` offer the same interface, including the class
method `get_resolution_to_bitrate_map(fps)`.

## Limitations

- Only NVIDIA GPUs are detected (through `nvidia-smi`); with AMD or Intel
  hardware pass the GPU index with `-g`.
- The program header shows the title and version only.