"""Public API for the interactive Mandelbrot viewer core."""

from .animation import STEP_DIVISOR, AnimationState, raw_budget
from .coloring import map_color, map_colors
from .interaction import InteractionController, Selection
from .renderer import (
    HORIZON,
    FramePipeline,
    FrameSizeError,
    RenderedFrame,
    escape_count,
    escape_counts,
    generate_frame,
    partition_rows,
)
from .state import FrameValidity, ViewerState, tick
from .viewport import (
    DEFAULT_RANGE_X,
    DEFAULT_RANGE_Y,
    HEIGHT,
    WIDTH,
    Bounds,
    ScreenPoint,
    ScreenRect,
    Viewport,
)

__all__ = [
    "AnimationState",
    "Bounds",
    "DEFAULT_RANGE_X",
    "DEFAULT_RANGE_Y",
    "FramePipeline",
    "FrameSizeError",
    "FrameValidity",
    "HEIGHT",
    "HORIZON",
    "InteractionController",
    "RenderedFrame",
    "STEP_DIVISOR",
    "ScreenPoint",
    "ScreenRect",
    "Selection",
    "ViewerState",
    "Viewport",
    "WIDTH",
    "escape_count",
    "escape_counts",
    "generate_frame",
    "map_color",
    "map_colors",
    "partition_rows",
    "raw_budget",
    "tick",
]
