"""Escape-time evaluation and parallel frame rendering."""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

import numpy as np
import tensorflow as tf

from .coloring import map_colors
from .viewport import Bounds, Viewport

# Points with |z| equal to the horizon are still considered bounded.
HORIZON = 2.0


class FrameSizeError(RuntimeError):
    """A rendered buffer does not match the dimensions of its display."""


@dataclass(frozen=True)
class RenderedFrame:
    """An RGB8 frame together with the inputs it was computed from."""

    pixels: np.ndarray
    max_iterations: int
    range_x: Bounds
    range_y: Bounds

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    def to_bytes(self) -> bytes:
        return self.pixels.tobytes()

    def require_size(self, width: int, height: int) -> None:
        if self.pixels.shape != (height, width, 3):
            raise FrameSizeError(
                f"frame of shape {self.pixels.shape} cannot be shown on a {width}x{height} surface"
            )


def escape_count(c: complex, max_iterations: int) -> int:
    """Return the iteration at which the orbit of ``c`` leaves the horizon.

    A result equal to ``max_iterations`` means the point did not escape.
    """

    if max_iterations < 0:
        raise ValueError(f"max_iterations must be non-negative, got {max_iterations}")
    z = 0j
    j = 0
    while j < max_iterations and abs(z) <= HORIZON:
        z = z * z + c
        j += 1
    return j


@tf.function
def _escape_step(zs: tf.Tensor, cs: tf.Tensor, ns: tf.Tensor, active: tf.Tensor) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor]:
    """Advance every orbit that is still inside the horizon by one iteration."""

    zs_new = zs * zs + cs
    zs = tf.where(active, zs_new, zs)
    ns = ns + tf.cast(active, tf.int32)
    az = tf.abs(zs)
    horizon = tf.cast(HORIZON, az.dtype)
    new_active = tf.logical_and(active, az <= horizon)
    return zs, ns, new_active


@tf.function(input_signature=[
    tf.TensorSpec(shape=[None], dtype=tf.complex128),
    tf.TensorSpec(shape=[], dtype=tf.int32),
])
def _escape_run(cs: tf.Tensor, max_iterations: tf.Tensor) -> tf.Tensor:
    i = tf.constant(0, dtype=tf.int32)
    zs = tf.zeros_like(cs)
    ns = tf.zeros(tf.shape(cs), dtype=tf.int32)
    active = tf.ones(tf.shape(cs), dtype=tf.bool)

    def cond(i: tf.Tensor, zs: tf.Tensor, ns: tf.Tensor, active: tf.Tensor) -> tf.Tensor:
        return tf.logical_and(tf.less(i, max_iterations), tf.reduce_any(active))

    def body(i: tf.Tensor, zs: tf.Tensor, ns: tf.Tensor, active: tf.Tensor) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor]:
        zs, ns, active = _escape_step(zs, cs, ns, active)
        return i + 1, zs, ns, active

    _, _, ns, _ = tf.while_loop(cond, body, (i, zs, ns, active))
    return ns


def escape_counts(points: np.ndarray, max_iterations: int, *, device: Optional[str] = None) -> np.ndarray:
    """Vectorized :func:`escape_count` over an array of plane points."""

    if max_iterations < 0:
        raise ValueError(f"max_iterations must be non-negative, got {max_iterations}")
    points = np.asarray(points, dtype=np.complex128)
    with tf.device(device if device is not None else "/CPU:0"):
        cs = tf.convert_to_tensor(points.reshape(-1), dtype=tf.complex128)
        ns = _escape_run(cs, tf.constant(max_iterations, dtype=tf.int32))
    return ns.numpy().reshape(points.shape)


def partition_rows(height: int, workers: int) -> list[tuple[int, int]]:
    """Split ``height`` rows into at most ``workers`` contiguous, disjoint ranges."""

    workers = max(1, min(int(workers), int(height)))
    base, extra = divmod(height, workers)
    chunks = []
    start = 0
    for k in range(workers):
        stop = start + base + (1 if k < extra else 0)
        chunks.append((start, stop))
        start = stop
    return chunks


class FramePipeline:
    """Fixed pool of workers that renders frames row-chunk by row-chunk."""

    def __init__(self, workers: Optional[int] = None, *, device: Optional[str] = None) -> None:
        self.workers = max(1, int(workers or os.cpu_count() or 1))
        self.device = device
        self._executor = ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="mandelview-raster")

    def __enter__(self) -> "FramePipeline":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._executor.shutdown(wait=True)

    def generate_frame(self, viewport: Viewport, max_iterations: int) -> RenderedFrame:
        """Render one RGB8 frame of ``viewport`` with the given iteration cap.

        The output depends only on the viewport ranges, the cap and the pixel
        index, so it is identical for any number of workers.
        """

        snapshot = Viewport(viewport.width, viewport.height, viewport.range_x, viewport.range_y)
        buffer = np.empty(snapshot.pixel_count * 3, dtype=np.uint8)

        futures = [
            self._executor.submit(self._render_rows, snapshot, max_iterations, buffer, first, last)
            for first, last in partition_rows(snapshot.height, self.workers)
        ]
        for future in futures:
            future.result()

        return RenderedFrame(
            pixels=buffer.reshape(snapshot.height, snapshot.width, 3),
            max_iterations=max_iterations,
            range_x=snapshot.range_x,
            range_y=snapshot.range_y,
        )

    def _render_rows(self, viewport: Viewport, max_iterations: int, buffer: np.ndarray, first: int, last: int) -> None:
        start = first * viewport.width
        stop = last * viewport.width
        counts = escape_counts(viewport.plane_grid(start, stop), max_iterations, device=self.device)
        buffer[3 * start:3 * stop] = map_colors(counts, max_iterations).reshape(-1)


def generate_frame(
    viewport: Viewport,
    max_iterations: int,
    *,
    workers: Optional[int] = None,
    device: Optional[str] = None,
) -> RenderedFrame:
    """Render a single frame with a short-lived pipeline."""

    with FramePipeline(workers, device=device) as pipeline:
        return pipeline.generate_frame(viewport, max_iterations)
