"""
Pan, zoom and rotation state for the diagram surface.

Rotation is a presentation transform of the whole rendered diagram. It never
changes shape geometry, signatures or label centroids.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Final, Optional, Tuple

INITIAL_SCALE: Final[float] = 0.5
MIN_SCALE: Final[float] = 0.1
MAX_SCALE: Final[float] = 8.0
DEFAULT_ZOOM_STEP: Final[float] = 0.2
QUARTER_TURN: Final[float] = 90.0

TouchPoint = Tuple[float, float]


def normalize_degrees(degrees: float) -> float:
    return degrees % 360.0


@dataclass
class Viewport:
    scale: float = INITIAL_SCALE
    translate_x: float = 0.0
    translate_y: float = 0.0
    rotation: float = 0.0

    def zoom_in(self, step: float = DEFAULT_ZOOM_STEP) -> float:
        return self._set_scale(self.scale * math.exp(step))

    def zoom_out(self, step: float = DEFAULT_ZOOM_STEP) -> float:
        return self._set_scale(self.scale * math.exp(-step))

    def pan(self, dx: float, dy: float) -> None:
        self.translate_x += dx
        self.translate_y += dy

    def reset(self) -> None:
        """Return to the initial fit with no rotation."""
        self.scale = INITIAL_SCALE
        self.translate_x = 0.0
        self.translate_y = 0.0
        self.rotation = 0.0

    def rotate(self, delta_degrees: float) -> float:
        self.rotation = normalize_degrees(self.rotation + delta_degrees)
        return self.rotation

    def rotate_quarter(self) -> float:
        """Rotate by one button press on the admin map."""
        return self.rotate(QUARTER_TURN)

    def set_rotation(self, degrees: float) -> float:
        self.rotation = normalize_degrees(degrees)
        return self.rotation

    def css_transform(self) -> str:
        return (
            f"translate({_fmt(self.translate_x)}px, {_fmt(self.translate_y)}px) "
            f"scale({_fmt(self.scale)}) rotate({_fmt(self.rotation)}deg)"
        )

    def _set_scale(self, value: float) -> float:
        self.scale = min(MAX_SCALE, max(MIN_SCALE, value))
        return self.scale


class RotationGesture:
    """Two-finger rotation tracking for touch screens."""

    def __init__(self, viewport: Viewport) -> None:
        self._viewport = viewport
        self._start_angle: Optional[float] = None
        self._start_rotation: float = 0.0

    @property
    def active(self) -> bool:
        return self._start_angle is not None

    def begin(self, first: TouchPoint, second: TouchPoint) -> None:
        self._start_angle = _touch_angle(first, second)
        self._start_rotation = self._viewport.rotation

    def move(self, first: TouchPoint, second: TouchPoint) -> float:
        if self._start_angle is None:
            return self._viewport.rotation
        delta = _touch_angle(first, second) - self._start_angle
        return self._viewport.set_rotation(self._start_rotation + delta)

    def end(self) -> None:
        self._start_angle = None
        self._start_rotation = 0.0


def _touch_angle(first: TouchPoint, second: TouchPoint) -> float:
    return math.degrees(math.atan2(second[1] - first[1], second[0] - first[0]))


def _fmt(value: float) -> str:
    return f"{value:.4f}".rstrip("0").rstrip(".") or "0"
