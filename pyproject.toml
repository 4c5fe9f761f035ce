[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "encbench"
version = "0.1.0"
description = "Benchmark and permute hardware video encoder settings through ffmpeg"
requires-python = ">=3.10"
keywords = ["ffmpeg", "encoder", "benchmark", "nvenc", "amf", "qsv", "vmaf"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Video :: Conversion",
    "Topic :: System :: Benchmark",
]
dependencies = [
    "tqdm",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
encoder-benchmark = "encbench.benchmark:main"
encoder-permutor = "encbench.permutor:main"

[tool.hatch.build.targets.wheel]
packages = ["encbench"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
