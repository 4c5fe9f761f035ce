from encbench.metadata import MetaData


def test_default_is_empty():
    assert MetaData().is_empty() is True


def test_with_frames_is_not_empty():
    assert MetaData(fps=60, frames=1923, width=1920, height=1080).is_empty() is False


def test_resolution_joins_width_and_height():
    metadata = MetaData(fps=60, frames=1923, width=1920, height=1080)
    assert metadata.resolution() == "1920x1080"


def test_str_format():
    metadata = MetaData(fps=60, frames=1923, width=1920, height=1080)
    assert str(metadata) == (
        "Video metadata: fps: 60, total_frames: 1923, resolution: 1920x1080"
    )


def test_default_fields_are_zero():
    metadata = MetaData()
    assert (metadata.fps, metadata.frames, metadata.width, metadata.height) == (
        0,
        0,
        0,
        0,
    )