"""Mapping between the pixel grid, the window and the complex plane."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

WIDTH = 1200
HEIGHT = 800


@dataclass(frozen=True)
class Bounds:
    """Half-open interval ``[start, end)`` on one axis of the complex plane."""

    start: float
    end: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.start) and math.isfinite(self.end)):
            raise ValueError(f"bounds must be finite, got [{self.start}, {self.end})")
        if not self.start < self.end:
            raise ValueError(f"bounds require start < end, got [{self.start}, {self.end})")

    @classmethod
    def ordered(cls, a: float, b: float) -> "Bounds":
        return cls(min(a, b), max(a, b))

    @property
    def span(self) -> float:
        return self.end - self.start


DEFAULT_RANGE_X = Bounds(-2.00, 0.47)
DEFAULT_RANGE_Y = Bounds(-1.12, 1.12)


@dataclass(frozen=True)
class ScreenPoint:
    """Window-local pointer position; y grows downward."""

    x: float
    y: float


@dataclass(frozen=True)
class ScreenRect:
    """Window rectangle given by its top-left corner and size."""

    left: float
    top: float
    width: float
    height: float


def _map_range(value: float, in_start: float, in_end: float, out: Bounds) -> float:
    return out.start + (value - in_start) * (out.end - out.start) / (in_end - in_start)


class Viewport:
    """The rectangle of the complex plane currently shown on the pixel grid."""

    def __init__(
        self,
        width: int = WIDTH,
        height: int = HEIGHT,
        range_x: Bounds = DEFAULT_RANGE_X,
        range_y: Bounds = DEFAULT_RANGE_Y,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"grid dimensions must be positive, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self.range_x = range_x
        self.range_y = range_y

    def __repr__(self) -> str:
        return (
            f"Viewport({self.width}x{self.height}, "
            f"x=[{self.range_x.start:.6g}, {self.range_x.end:.6g}), "
            f"y=[{self.range_y.start:.6g}, {self.range_y.end:.6g}))"
        )

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    def pixel_to_plane(self, index: int) -> complex:
        """Return the plane point sampled by the linear pixel ``index``."""

        if not 0 <= index < self.pixel_count:
            raise IndexError(f"pixel index {index} outside [0, {self.pixel_count})")
        column = index % self.width
        row = index // self.width
        real = self.range_x.start + (self.range_x.end - self.range_x.start) * column / self.width
        imag = self.range_y.start + (self.range_y.end - self.range_y.start) * row / self.height
        return complex(real, imag)

    def plane_grid(self, start: int, stop: int) -> np.ndarray:
        """Vectorized ``pixel_to_plane`` over the index range ``[start, stop)``."""

        indices = np.arange(start, stop, dtype=np.int64)
        columns = (indices % self.width).astype(np.float64)
        rows = (indices // self.width).astype(np.float64)
        x_span = np.float64(self.range_x.end - self.range_x.start)
        y_span = np.float64(self.range_y.end - self.range_y.start)
        real = np.float64(self.range_x.start) + x_span * columns / np.float64(self.width)
        imag = np.float64(self.range_y.start) + y_span * rows / np.float64(self.height)
        points = np.empty(indices.shape, dtype=np.complex128)
        points.real = real
        points.imag = imag
        return points

    def screen_to_plane(self, point: ScreenPoint, window: ScreenRect) -> tuple[float, float]:
        x = _map_range(point.x, window.left, window.left + window.width, self.range_x)
        y = _map_range(point.y, window.top, window.top + window.height, self.range_y)
        return x, y

    def rebase(self, p0: ScreenPoint, p1: ScreenPoint, window: ScreenRect) -> bool:
        """Zoom onto the screen rectangle spanned by ``p0`` and ``p1``.

        Corners may be given in any order. A selection with zero extent on
        either axis leaves the viewport untouched. Returns whether the
        viewport changed.
        """

        if p0 == p1:
            return False
        x0, y0 = self.screen_to_plane(p0, window)
        x1, y1 = self.screen_to_plane(p1, window)
        if x0 == x1 or y0 == y1:
            return False
        self.range_x = Bounds.ordered(x0, x1)
        self.range_y = Bounds.ordered(y0, y1)
        return True

    def reset(self) -> None:
        self.range_x = DEFAULT_RANGE_X
        self.range_y = DEFAULT_RANGE_Y
