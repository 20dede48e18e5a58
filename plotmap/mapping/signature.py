from __future__ import annotations

import re
from typing import Final, Optional

from plotmap.domain.shapes import ShapeKind, ShapeNode

# Rects wider than this are background panels, never plots.
BACKGROUND_PANEL_MIN_WIDTH: Final[float] = 2000

# Paths are identified by a prefix of their drawing commands only. Paths that
# share this many leading characters get the same signature.
PATH_PREFIX_LENGTH: Final[int] = 30

_WHITESPACE = re.compile(r"\s+")


def derive_signature(shape: ShapeNode) -> Optional[str]:
    """
    Return the join key for a shape, or None if it cannot be bound to a plot.

    Values are used exactly as written in the source document, so ``"10"`` and
    ``"10.0"`` yield different signatures. Missing geometry gives None.
    """
    if not shape.is_shape or not shape.has_complete_geometry:
        return None

    geometry = shape.geometry
    if shape.kind is ShapeKind.RECT:
        return "rect-{x}-{y}-{width}-{height}".format(**geometry)
    if shape.kind is ShapeKind.POLYGON:
        points = _WHITESPACE.sub("-", geometry["points"]).replace(",", "_")
        return f"poly-{points}"
    if shape.kind is ShapeKind.PATH:
        prefix = geometry["d"][:PATH_PREFIX_LENGTH]
        return f"path-{_WHITESPACE.sub('-', prefix)}"
    if shape.kind is ShapeKind.CIRCLE:
        return "circle-{cx}-{cy}-{r}".format(**geometry)
    return None


def is_background_panel(shape: ShapeNode) -> bool:
    """True for rects wide enough to be the drawing's backdrop."""
    if shape.kind is not ShapeKind.RECT:
        return False
    raw_width = (shape.geometry.get("width") or "0").strip() or "0"
    try:
        width = float(raw_width)
    except ValueError:
        return False
    return width > BACKGROUND_PANEL_MIN_WIDTH
