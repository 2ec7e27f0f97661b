"""Pointer and keyboard handling for the viewer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .viewport import ScreenPoint, ScreenRect

if TYPE_CHECKING:
    from .state import ViewerState

FREEZE_KEYS = frozenset({"r", "R"})
TOGGLE_KEYS = frozenset({" ", "space"})
SNAPSHOT_KEYS = frozenset({"s", "S"})


@dataclass(frozen=True)
class Selection:
    """Drag rectangle between the press position and the pointer."""

    anchor: ScreenPoint
    current: ScreenPoint

    @property
    def is_empty(self) -> bool:
        return self.anchor == self.current

    def corners(self) -> tuple[float, float, float, float]:
        """Return ``(left, top, width, height)`` of the rectangle on screen."""

        left = min(self.anchor.x, self.current.x)
        top = min(self.anchor.y, self.current.y)
        return left, top, abs(self.current.x - self.anchor.x), abs(self.current.y - self.anchor.y)


class InteractionController:
    """Translate input events into viewer state changes.

    Events that arrive out of order, such as a release without a press, are
    ignored.
    """

    def __init__(self, state: "ViewerState") -> None:
        self.state = state

    def press_primary(self, position: ScreenPoint) -> None:
        self.state.selection = Selection(anchor=position, current=position)

    def move(self, position: ScreenPoint, window: ScreenRect) -> None:
        selection = self.state.selection
        if selection is None:
            return
        anchor = selection.anchor
        # Height follows the horizontal drag so the box keeps the window aspect.
        y = anchor.y + (position.x - anchor.x) * window.height / window.width
        self.state.selection = Selection(anchor=anchor, current=ScreenPoint(position.x, y))

    def release_primary(self, window: ScreenRect) -> bool:
        """Finish a drag; return whether the viewport was zoomed."""

        selection = self.state.selection
        if selection is None:
            return False
        self.state.selection = None
        if selection.is_empty:
            return False
        if self.state.viewport.rebase(selection.anchor, selection.current, window):
            self.state.invalidate()
            return True
        return False

    def release_secondary(self) -> None:
        # Takes precedence over a drag in progress.
        self.state.selection = None
        self.state.viewport.reset()
        self.state.animation.freeze_depth()
        self.state.invalidate()

    def key_press(self, key: str) -> None:
        if key in FREEZE_KEYS:
            self.state.animation.freeze_depth()
        elif key in TOGGLE_KEYS:
            self.state.animation.toggle_running()
        elif key in SNAPSHOT_KEYS:
            self.state.snapshot_requested = True
