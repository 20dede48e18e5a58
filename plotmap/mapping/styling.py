"""
Style and overlay resolution for diagram shapes.

Given one shape, its signature and the plot registry of the current render
pass, decide how the shape is painted, whether it reacts to the pointer and
which labels are drawn on top of it.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Final, Optional, Tuple, Union

from plotmap.domain.plots import Plot, PlotStatus
from plotmap.domain.shapes import ShapeKind, ShapeNode
from plotmap.mapping.registry import PlotRegistry
from plotmap.mapping.signature import is_background_panel

SELECTED_FILL: Final[str] = "rgba(59, 130, 246, 0.6)"
SELECTED_STROKE: Final[str] = "#2563eb"
SELECTED_STROKE_WIDTH: Final[str] = "8"
DEFAULT_STROKE: Final[str] = "#000"
DEFAULT_STROKE_WIDTH: Final[str] = "2"
ADMIN_UNMAPPED_FILL: Final[str] = "rgba(0,0,0,0.05)"
PUBLIC_UNMAPPED_FILL: Final[str] = "transparent"

STATUS_FILLS: Final[dict] = {
    PlotStatus.AVAILABLE: "rgba(34, 197, 94, 0.4)",
    PlotStatus.SOLD: "rgba(239, 68, 68, 0.6)",
    PlotStatus.HOLD: "rgba(234, 179, 8, 0.5)",
    PlotStatus.ROAD: "rgba(0, 0, 0, 0.2)",
}

# Overlay geometry, in diagram units relative to the centroid.
BADGE_RADIUS: Final[int] = 160
DIMENSION_OFFSET: Final[int] = 220

_LEADING_NUMBER = re.compile(r"\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)")
_POINT_SEPARATORS = re.compile(r"[\s,]+")


@dataclass(frozen=True)
class OverlayText:
    x: float
    y: float
    text: str
    fill: str
    font_size: int
    font_weight: str
    rotate: Optional[int] = None
    style: Optional[str] = None


@dataclass(frozen=True)
class OverlayDisk:
    cx: float
    cy: float
    r: int
    fill: str = "white"


@dataclass(frozen=True)
class OverlayRule:
    x1: float
    y1: float
    x2: float
    y2: float
    stroke: str = "#cbd5e1"
    stroke_width: int = 4


OverlayItem = Union[OverlayText, OverlayDisk, OverlayRule]


@dataclass(frozen=True)
class Overlay:
    """Pointer-transparent annotation drawn over a matched shape."""

    centroid: Tuple[float, float]
    items: Tuple[OverlayItem, ...]
    is_road: bool = False


@dataclass(frozen=True)
class RenderDecision:
    """How one shape is presented for the current render pass."""

    passthrough: bool = False
    fill_color: Optional[str] = None
    stroke_color: Optional[str] = None
    stroke_width: Optional[str] = None
    is_interactive: bool = False
    cursor: Optional[str] = None
    pointer_events: Optional[str] = None
    overlay: Optional[Overlay] = None
    plot: Optional[Plot] = None


PASSTHROUGH = RenderDecision(passthrough=True)


def resolve_style(
    shape: ShapeNode,
    signature: Optional[str],
    registry: PlotRegistry,
    selected_id: Optional[int],
    is_admin: bool,
) -> RenderDecision:
    """Decide fill, stroke, interactivity and overlay for one shape."""
    if signature is None or is_background_panel(shape):
        return PASSTHROUGH

    plot = registry.get(signature)
    source_stroke = shape.get("stroke") or DEFAULT_STROKE
    source_stroke_width = shape.get("stroke-width") or DEFAULT_STROKE_WIDTH
    unmapped_fill = ADMIN_UNMAPPED_FILL if is_admin else PUBLIC_UNMAPPED_FILL

    if plot is None:
        return RenderDecision(
            fill_color=unmapped_fill,
            stroke_color=source_stroke,
            stroke_width=source_stroke_width,
            is_interactive=is_admin,
            cursor="pointer",
            pointer_events="auto" if is_admin else "none",
        )

    road_locked = plot.is_road and not is_admin
    common = dict(
        is_interactive=not road_locked,
        cursor="default" if plot.is_road else "pointer",
        pointer_events="none" if road_locked else "auto",
        overlay=None if plot.is_pending else build_overlay(shape, plot),
        plot=plot,
    )

    if selected_id is not None and plot.id == selected_id:
        return RenderDecision(
            fill_color=SELECTED_FILL,
            stroke_color=SELECTED_STROKE,
            stroke_width=SELECTED_STROKE_WIDTH,
            **common,
        )

    if plot.is_pending:
        # An unsaved plot must not claim a status it does not have yet.
        fill = unmapped_fill
    else:
        fill = STATUS_FILLS.get(plot.status, PUBLIC_UNMAPPED_FILL)
    return RenderDecision(
        fill_color=fill,
        stroke_color=source_stroke,
        stroke_width=source_stroke_width,
        **common,
    )


def build_overlay(shape: ShapeNode, plot: Plot) -> Overlay:
    cx, cy = shape_centroid(shape)
    label = plot.plot_number or ""

    if plot.status is PlotStatus.ROAD:
        road_label = OverlayText(
            x=cx,
            y=cy,
            text=label,
            fill="#4b5563",
            font_size=80,
            font_weight="bold",
            style="letter-spacing: 2px; text-transform: uppercase",
        )
        return Overlay(centroid=(cx, cy), items=(road_label,), is_road=True)

    items: list = [
        OverlayDisk(cx=cx, cy=cy, r=BADGE_RADIUS),
        OverlayText(x=cx, y=cy - 30, text=label, fill="black", font_size=72, font_weight="900"),
        OverlayRule(x1=cx - 70, y1=cy + 15, x2=cx + 70, y2=cy + 15),
        OverlayText(
            x=cx,
            y=cy + 60,
            text=format_number(plot.area_sqyds),
            fill="#64748b",
            font_size=40,
            font_weight="bold",
        ),
    ]

    placements = (
        ("dim_top", cx, cy - DIMENSION_OFFSET, None),
        ("dim_bottom", cx, cy + DIMENSION_OFFSET, None),
        ("dim_left", cx - DIMENSION_OFFSET, cy, -90),
        ("dim_right", cx + DIMENSION_OFFSET, cy, 90),
    )
    for field_name, x, y, rotate in placements:
        value = getattr(plot, field_name)
        if value:
            items.append(
                OverlayText(
                    x=x,
                    y=y,
                    text=str(value),
                    fill="#1e293b",
                    font_size=56,
                    font_weight="bold",
                    rotate=rotate,
                )
            )
    return Overlay(centroid=(cx, cy), items=tuple(items))


def shape_centroid(shape: ShapeNode) -> Tuple[float, float]:
    """
    Label anchor for a shape.

    Rects use their geometric center and polygons the mean of their vertices.
    Paths and circles anchor at the origin.
    """
    if shape.kind is ShapeKind.RECT:
        x = _leading_float(shape.geometry.get("x"))
        y = _leading_float(shape.geometry.get("y"))
        w = _leading_float(shape.geometry.get("width"))
        h = _leading_float(shape.geometry.get("height"))
        return (x + w / 2, y + h / 2)

    if shape.kind is ShapeKind.POLYGON:
        raw = shape.geometry.get("points") or ""
        tokens = [token for token in _POINT_SEPARATORS.split(raw) if token]
        try:
            values = [float(token) for token in tokens]
        except ValueError:
            return (0.0, 0.0)
        if len(values) < 2:
            return (0.0, 0.0)
        xs = values[0::2]
        ys = values[1::2]
        count = len(xs)
        return (sum(xs) / count, sum(ys) / count)

    return (0.0, 0.0)


def format_number(value: Optional[float]) -> str:
    """Render a number the way a label shows it: ``120`` not ``120.0``."""
    if value is None:
        return ""
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    return str(value)


def _leading_float(raw: Optional[str]) -> float:
    if not raw:
        return 0.0
    match = _LEADING_NUMBER.match(raw)
    if not match:
        return 0.0
    return float(match.group(1))
