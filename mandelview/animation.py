"""Time-driven iteration budget."""

from __future__ import annotations

from dataclasses import dataclass

# Milliseconds of wall time per additional iteration.
STEP_DIVISOR = 100


def raw_budget(elapsed_ms: int, step_divisor: int = STEP_DIVISOR) -> int:
    if elapsed_ms < 0:
        raise ValueError(f"elapsed time must be non-negative, got {elapsed_ms}")
    return int(elapsed_ms) // step_divisor


@dataclass
class AnimationState:
    """Iteration depth that grows with elapsed time.

    ``raw_budget`` follows the clock and never decreases. ``offset`` is the
    baseline subtracted from it; freezing depth or pausing moves the offset
    instead of stopping the clock.
    """

    raw_budget: int = 0
    offset: int = 0
    running: bool = True
    step_divisor: int = STEP_DIVISOR

    @property
    def effective_iterations(self) -> int:
        return self.raw_budget - self.offset

    def advance(self, elapsed_ms: int) -> bool:
        """Update ``raw_budget`` from the clock; return whether it changed.

        While paused, the offset absorbs every increase so the effective
        depth holds its last value.
        """

        budget = raw_budget(elapsed_ms, self.step_divisor)
        if budget <= self.raw_budget:
            return False
        if not self.running:
            self.offset += budget - self.raw_budget
        self.raw_budget = budget
        return True

    def freeze_depth(self) -> None:
        self.offset = self.raw_budget

    def toggle_running(self) -> bool:
        self.running = not self.running
        return self.running
