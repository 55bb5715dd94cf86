"""
Render parameters and navigation state.

FractalParams is the per-frame window on the complex plane plus the
iteration cap. It is frozen so one snapshot is shared by every work unit
of a generation pass.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Tuple

DEFAULT_SIZE = (1024, 1024)
DEFAULT_MAX_ITERATIONS = 180
DEFAULT_TILE = (16, 16)


class ParamsError(ValueError):
    """Raised when render parameters are rejected before dispatch."""


@dataclass(frozen=True)
class FractalParams:
    x_min: float = -2.0
    x_max: float = 1.0
    y_min: float = -1.5
    y_max: float = 1.5
    max_iterations: int = DEFAULT_MAX_ITERATIONS

    def validate(self) -> "FractalParams":
        bounds = (self.x_min, self.x_max, self.y_min, self.y_max)
        if not all(math.isfinite(b) for b in bounds):
            raise ParamsError(f"Bounds must be finite, got {bounds}")
        if self.x_min >= self.x_max:
            raise ParamsError(f"x_min ({self.x_min}) must be less than x_max ({self.x_max})")
        if self.y_min >= self.y_max:
            raise ParamsError(f"y_min ({self.y_min}) must be less than y_max ({self.y_max})")
        if not is_positive_int(self.max_iterations):
            raise ParamsError(f"max_iterations must be a positive integer, got {self.max_iterations}")
        return self

    @property
    def extent(self) -> Tuple[float, float, float, float]:
        """(x_min, x_max, y_min, y_max), the order matplotlib's imshow expects."""
        return (self.x_min, self.x_max, self.y_min, self.y_max)


def is_positive_int(v) -> bool:
    return isinstance(v, numbers.Integral) and not isinstance(v, bool) and v > 0


def validate_size(width: int, height: int) -> Tuple[int, int]:
    if not (is_positive_int(width) and is_positive_int(height)):
        raise ParamsError(f"Image size must be positive integers, got {width}x{height}")
    return int(width), int(height)


@dataclass
class View:
    """
    Pan/zoom state for a square window centred on `center`.

    `zoom` is the half-extent of the window on both axes. Moves are
    scaled by the current zoom, so panning speed is constant on screen.
    """
    center: Tuple[float, float] = (0.0, 0.0)
    zoom: float = 1.0
    move_speed: float = 0.05

    def _step(self) -> float:
        return self.zoom * self.move_speed

    def left(self):
        x, y = self.center
        self.center = (x - self._step(), y)

    def right(self):
        x, y = self.center
        self.center = (x + self._step(), y)

    def up(self):
        # image rows grow downward, so "up" moves towards y_min
        x, y = self.center
        self.center = (x, y - self._step())

    def down(self):
        x, y = self.center
        self.center = (x, y + self._step())

    def zoom_in(self):
        self.zoom *= 0.5

    def zoom_out(self):
        self.zoom *= 2.0

    def to_params(self, max_iterations: int = DEFAULT_MAX_ITERATIONS) -> FractalParams:
        x, y = self.center
        return FractalParams(
            x_min=x - self.zoom,
            x_max=x + self.zoom,
            y_min=y - self.zoom,
            y_max=y + self.zoom,
            max_iterations=max_iterations,
        )
