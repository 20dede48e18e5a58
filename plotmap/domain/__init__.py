"""
Domain models package.

This package contains domain models for the application.
"""

from plotmap.domain.diagrams import StoredDiagram
from plotmap.domain.plots import (
    Facing,
    Pending,
    Persisted,
    Plot,
    PlotKey,
    PlotStatus,
    key_from_id,
    new_placeholder,
)
from plotmap.domain.shapes import ShapeKind, ShapeNode
from plotmap.domain.viewport import RotationGesture, Viewport

__all__ = [
    'Facing',
    'Pending',
    'Persisted',
    'Plot',
    'PlotKey',
    'PlotStatus',
    'RotationGesture',
    'ShapeKind',
    'ShapeNode',
    'StoredDiagram',
    'Viewport',
    'key_from_id',
    'new_placeholder',
]
