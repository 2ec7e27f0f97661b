import os
import sys
import time
import warnings
from dataclasses import dataclass
from pathlib import Path

_VERBOSE_FLAGS = {"--verbose", "-v"}
_cli_verbose = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])
_env_log_level = os.environ.get("TF_CPP_MIN_LOG_LEVEL")
_suppress_messages = (not _cli_verbose) and _env_log_level != "0"

if _suppress_messages and _env_log_level is None:
    os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"

if _suppress_messages:
    warnings.filterwarnings(
        "ignore",
        message=r"Protobuf gencode version .* is exactly one major version older than the runtime version .*",
        category=UserWarning,
        module="google.protobuf",
    )

VERBOSE = _cli_verbose


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


import tensorflow as tf
import numpy as np

if _suppress_messages:
    tf.get_logger().setLevel("ERROR")
    for handler in tf.get_logger().handlers:
        handler.setLevel("ERROR")

import PIL.Image
import matplotlib.patches as patches
import matplotlib.pyplot as plt
from matplotlib.backend_bases import MouseButton

from mandelview import (
    HEIGHT,
    WIDTH,
    Bounds,
    FramePipeline,
    InteractionController,
    RenderedFrame,
    ScreenPoint,
    ScreenRect,
    ViewerState,
    Viewport,
    generate_frame,
    tick,
)

from argparse import ArgumentParser

WINDOW = ScreenRect(0.0, 0.0, float(WIDTH), float(HEIGHT))
TICK_INTERVAL_MS = 16


def select_device() -> str:
    """Use the first GPU when TensorFlow sees one, the CPU otherwise."""

    gpus = tf.config.list_physical_devices('GPU')
    if not gpus:
        log("No GPU found, using CPU")
        return '/CPU:0'
    try:
        for gpu in gpus:
            tf.config.experimental.set_memory_growth(gpu, True)
    except RuntimeError as e:
        log(e)
        return '/CPU:0'
    log("GPU found, using %s" % gpus[0].name)
    return '/GPU:0'


@dataclass(frozen=True)
class ViewerConfig:
    workers: int
    snapshot_path: Path | None
    snapshot_dir: Path
    image_format: str
    iterations: int
    range_x: Bounds
    range_y: Bounds


def build_parser():
    parser = ArgumentParser(description='Interactive Mandelbrot viewer with time-driven iteration depth.')

    parser.add_argument('--workers', type=int,
                        dest='workers', help='number of threads rendering each frame (default: CPU count)',
                        metavar='WORKERS', default=None)

    parser.add_argument('--snapshot', type=str,
                        dest='snapshot', help='render a single frame to this file and exit without opening a window',
                        metavar='PATH', default=None)

    parser.add_argument('--iterations', type=int,
                        dest='iterations', help='iteration cap used by --snapshot',
                        metavar='ITERATIONS', default=100)

    parser.add_argument('--range-x', type=float, nargs=2,
                        dest='range_x', help='real interval rendered by --snapshot',
                        metavar=('START', 'END'), default=None)

    parser.add_argument('--range-y', type=float, nargs=2,
                        dest='range_y', help='imaginary interval rendered by --snapshot',
                        metavar=('START', 'END'), default=None)

    parser.add_argument('--snapshot-dir', type=str,
                        dest='snapshot_dir', help='directory where the "s" key stores snapshots of the window',
                        metavar='DIR', default='./snapshots')

    parser.add_argument('--format', type=str,
                        dest='format', help='file format for snapshots. Can be any extension supported by Pillow. Default: "png".',
                        metavar='FORMAT', default='png')

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including TensorFlow and hardware diagnostics.')

    return parser


def _parse_bounds(values, default: Bounds, flag: str, parser: ArgumentParser) -> Bounds:
    if values is None:
        return default
    try:
        return Bounds(float(values[0]), float(values[1]))
    except ValueError as exc:
        parser.error(f"{flag}: {exc}")


def resolve_config(opt, parser: ArgumentParser) -> ViewerConfig:
    workers = opt.workers if opt.workers is not None else (os.cpu_count() or 1)
    if workers < 1:
        parser.error("--workers must be at least 1.")
    if opt.iterations < 0:
        parser.error("--iterations must be non-negative.")

    image_format = (opt.format or "png").lower().lstrip(".") or "png"

    snapshot_path: Path | None = None
    if opt.snapshot:
        snapshot_path = Path(opt.snapshot).expanduser()
        suffix = snapshot_path.suffix
        if suffix:
            if suffix.lower().lstrip(".") != image_format:
                parser.error(f"--snapshot extension {suffix} does not match --format {image_format}.")
        else:
            snapshot_path = snapshot_path.with_suffix(f".{image_format}")
        snapshot_path = snapshot_path.resolve()
    elif opt.range_x is not None or opt.range_y is not None:
        parser.error("--range-x and --range-y are only valid with --snapshot.")

    defaults = Viewport()
    return ViewerConfig(
        workers=workers,
        snapshot_path=snapshot_path,
        snapshot_dir=Path(opt.snapshot_dir).expanduser().resolve(),
        image_format=image_format,
        iterations=opt.iterations,
        range_x=_parse_bounds(opt.range_x, defaults.range_x, "--range-x", parser),
        range_y=_parse_bounds(opt.range_y, defaults.range_y, "--range-y", parser),
    )


def _pil_format_name(ext: str) -> str:
    upper = ext.upper()
    if upper == "JPG":
        return "JPEG"
    if upper == "TIF":
        return "TIFF"
    return upper


def write_snapshot(frame: RenderedFrame, output_path: Path, image_format: str) -> Path:
    """Write ``frame`` to ``output_path`` using the provided format."""

    image = PIL.Image.fromarray(frame.pixels)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    image.save(str(output_path), format=_pil_format_name(image_format))
    return output_path


class MatplotlibDisplay:
    """Window that forwards input to the controller and shows rendered frames."""

    def __init__(self, state: ViewerState, pipeline: FramePipeline, config: ViewerConfig):
        self.state = state
        self.pipeline = pipeline
        self.config = config
        self.controller = InteractionController(state)
        self.snapshot_count = 0

        # The viewer owns the mouse and the r/s keys; keep matplotlib's tools off them.
        plt.rcParams['toolbar'] = 'None'
        for keymap, key in (('keymap.home', 'r'), ('keymap.save', 's')):
            plt.rcParams[keymap] = [k for k in plt.rcParams[keymap] if k != key]

        dpi = 100
        self.figure = plt.figure(figsize=(WIDTH / dpi, HEIGHT / dpi), dpi=dpi)
        self.axes = self.figure.add_axes([0, 0, 1, 1])
        self.axes.set_axis_off()
        self.image = self.axes.imshow(
            np.zeros((HEIGHT, WIDTH, 3), dtype=np.uint8),
            origin='upper',
            extent=(0, WIDTH, HEIGHT, 0),
            interpolation='nearest',
        )
        self.selection_patch = patches.Rectangle(
            (0, 0), 0, 0, fill=False, edgecolor='lime', linewidth=1.0, visible=False
        )
        self.axes.add_patch(self.selection_patch)

        canvas = self.figure.canvas
        canvas.mpl_connect('button_press_event', self._on_press)
        canvas.mpl_connect('motion_notify_event', self._on_motion)
        canvas.mpl_connect('button_release_event', self._on_release)
        canvas.mpl_connect('key_press_event', self._on_key)

        self.start_time = time.monotonic()
        self.timer = canvas.new_timer(interval=TICK_INTERVAL_MS)
        self.timer.add_callback(self._on_tick)

    @staticmethod
    def _position(event):
        if event.xdata is None or event.ydata is None:
            return None
        return ScreenPoint(float(event.xdata), float(event.ydata))

    def _on_press(self, event):
        position = self._position(event)
        if position is not None and event.button == MouseButton.LEFT:
            self.controller.press_primary(position)

    def _on_motion(self, event):
        position = self._position(event)
        if position is not None:
            self.controller.move(position, WINDOW)

    def _on_release(self, event):
        if event.button == MouseButton.LEFT:
            if self.controller.release_primary(WINDOW):
                log("zoomed to %r" % (self.state.viewport,))
        elif event.button == MouseButton.RIGHT:
            self.controller.release_secondary()
            log("view reset")

    def _on_key(self, event):
        if event.key is None:
            return
        self.controller.key_press(event.key)
        if event.key in (" ", "space"):
            log("running" if self.state.animation.running else "paused")

    def present(self, frame: RenderedFrame) -> None:
        frame.require_size(WIDTH, HEIGHT)
        self.image.set_data(frame.pixels)
        manager = self.figure.canvas.manager
        if manager is not None:
            manager.set_window_title(f"mandelview: {frame.max_iterations} iterations")

    def _draw_selection(self) -> None:
        selection = self.state.selection
        if selection is None:
            self.selection_patch.set_visible(False)
            return
        left, top, width, height = selection.corners()
        self.selection_patch.set_bounds(left, top, width, height)
        self.selection_patch.set_visible(True)

    def _take_snapshot(self) -> None:
        self.state.snapshot_requested = False
        if self.state.frame is None:
            return
        path = self.config.snapshot_dir / f"mandelview_{self.snapshot_count:04d}.{self.config.image_format}"
        write_snapshot(self.state.frame, path, self.config.image_format)
        self.snapshot_count += 1
        print(f"Saved snapshot to {path}")

    def _on_tick(self):
        elapsed_ms = int((time.monotonic() - self.start_time) * 1000)
        started = time.perf_counter()
        if tick(self.state, elapsed_ms, self.pipeline):
            self.present(self.state.frame)
            log("frame at %d iterations in %.3fs" % (
                self.state.frame.max_iterations, time.perf_counter() - started))
        if self.state.snapshot_requested:
            self._take_snapshot()
        self._draw_selection()
        self.figure.canvas.draw_idle()

    def run(self) -> None:
        self.timer.start()
        plt.show()


def run_snapshot(config: ViewerConfig, device: str) -> None:
    viewport = Viewport(WIDTH, HEIGHT, config.range_x, config.range_y)
    frame = generate_frame(viewport, config.iterations, workers=config.workers, device=device)
    path = write_snapshot(frame, config.snapshot_path, config.image_format)
    print(f"Saved snapshot to {path}")


def main():
    parser = build_parser()
    opt = parser.parse_args()

    global VERBOSE
    VERBOSE = bool(opt.verbose)

    config = resolve_config(opt, parser)

    log("TensorFlow version: %s" % tf.__version__)
    device = select_device()

    if config.snapshot_path is not None:
        run_snapshot(config, device)
        return

    print("Controls: drag with the left button to zoom, right click to reset the view.")
    print("Key 'r': restart the depth animation. Space: pause/resume. Key 's': save a snapshot.")

    with FramePipeline(config.workers, device=device) as pipeline:
        MatplotlibDisplay(ViewerState(), pipeline, config).run()


if __name__ == '__main__':
    main()
