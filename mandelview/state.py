"""Viewer state aggregate and the per-tick frame invalidation policy."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Optional, Protocol

from .animation import AnimationState
from .interaction import Selection
from .renderer import RenderedFrame
from .viewport import Viewport


class FrameValidity(enum.Enum):
    VALID = "valid"
    INVALID = "invalid"


class FrameSource(Protocol):
    def generate_frame(self, viewport: Viewport, max_iterations: int) -> RenderedFrame:
        ...


@dataclass
class ViewerState:
    """All mutable state of a viewer, owned by the control loop."""

    viewport: Viewport = field(default_factory=Viewport)
    animation: AnimationState = field(default_factory=AnimationState)
    selection: Optional[Selection] = None
    validity: FrameValidity = FrameValidity.INVALID
    frame: Optional[RenderedFrame] = None
    snapshot_requested: bool = False

    def invalidate(self) -> None:
        self.validity = FrameValidity.INVALID

    @property
    def should_render(self) -> bool:
        if not self.animation.running:
            return False
        return self.validity is FrameValidity.INVALID or self.selection is not None


def tick(state: ViewerState, elapsed_ms: int, source: FrameSource) -> bool:
    """Advance ``state`` to ``elapsed_ms`` and render if the frame is stale.

    Returns True when a new frame was produced; otherwise ``state.frame`` is
    left as it was.
    """

    if state.animation.advance(elapsed_ms) and state.animation.running:
        state.invalidate()
    if state.selection is not None:
        state.invalidate()

    if not state.should_render:
        return False

    state.frame = source.generate_frame(state.viewport, state.animation.effective_iterations)
    if state.selection is None:
        state.validity = FrameValidity.VALID
    return True
