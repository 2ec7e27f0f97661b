"""Escape-count to RGB color mapping."""

from __future__ import annotations

import numpy as np
from matplotlib.colors import hsv_to_rgb


def map_colors(iterations: np.ndarray, max_iterations: int) -> np.ndarray:
    """Map escape counts to RGB8 colors.

    The hue walks the full color wheel as the escape count goes from zero to
    ``max_iterations``. Points that never escaped are drawn black.
    """

    iterations = np.asarray(iterations)
    if max_iterations > 0:
        hue = iterations.astype(np.float64) / np.float64(max_iterations)
    else:
        hue = np.zeros(iterations.shape, dtype=np.float64)
    saturation = np.ones(iterations.shape, dtype=np.float64)
    value = np.where(iterations < max_iterations, 1.0, 0.0)

    rgb = hsv_to_rgb(np.stack((hue, saturation, value), axis=-1))
    return (rgb * 255.0).astype(np.uint8)


def map_color(iteration: int, max_iterations: int) -> tuple[int, int, int]:
    r, g, b = map_colors(np.array([iteration]), max_iterations)[0]
    return int(r), int(g), int(b)
