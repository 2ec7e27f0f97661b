import numpy as np
import PIL.Image
import pytest

import viewer
from mandelview.renderer import generate_frame
from mandelview.viewport import Bounds, Viewport


def _config(*args):
    parser = viewer.build_parser()
    return viewer.resolve_config(parser.parse_args(list(args)), parser)


def test_defaults_open_interactive_window():
    config = _config()
    assert config.snapshot_path is None
    assert config.workers >= 1
    assert config.image_format == "png"
    assert config.range_x == Bounds(-2.00, 0.47)


def test_snapshot_path_gets_format_suffix(tmp_path):
    config = _config("--snapshot", str(tmp_path / "out"), "--format", "JPG", "--iterations", "12")
    assert config.snapshot_path == (tmp_path / "out.jpg").resolve()
    assert config.image_format == "jpg"
    assert config.iterations == 12


@pytest.mark.parametrize(
    "args",
    [
        ["--snapshot", "frame.png", "--format", "jpg"],
        ["--range-x", "-1", "1"],
        ["--snapshot", "frame.png", "--range-y", "1", "-1"],
        ["--workers", "0"],
        ["--iterations", "-3"],
    ],
)
def test_invalid_arguments_are_reported(args):
    with pytest.raises(SystemExit):
        _config(*args)


def test_pil_format_names():
    assert viewer._pil_format_name("jpg") == "JPEG"
    assert viewer._pil_format_name("tif") == "TIFF"
    assert viewer._pil_format_name("png") == "PNG"


def test_write_snapshot_round_trips_pixels(tmp_path):
    frame = generate_frame(Viewport(12, 8), 6, workers=2)
    path = viewer.write_snapshot(frame, tmp_path / "nested" / "shot.png", "png")
    with PIL.Image.open(path) as image:
        assert image.size == (12, 8)
        assert np.array_equal(np.asarray(image.convert("RGB")), frame.pixels)


def test_run_snapshot_renders_full_window(tmp_path):
    config = _config(
        "--snapshot", str(tmp_path / "full.png"),
        "--iterations", "3",
        "--workers", "2",
        "--range-x", "-1.5", "0.5",
    )
    viewer.run_snapshot(config, "/CPU:0")
    with PIL.Image.open(config.snapshot_path) as image:
        assert image.size == (viewer.WIDTH, viewer.HEIGHT)
