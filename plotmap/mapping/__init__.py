"""
Shape-to-plot binding engine.

Signatures join diagram shapes to plot records; the walker uses them to
produce an interactive copy of the diagram for one render pass.
"""

from plotmap.mapping.loader import DiagramLoadError, fetch_diagram, parse_diagram
from plotmap.mapping.registry import build_registry
from plotmap.mapping.signature import derive_signature, is_background_panel
from plotmap.mapping.styling import RenderDecision, resolve_style, shape_centroid
from plotmap.mapping.walker import RenderedDiagram, ShapeBinding, render_diagram

__all__ = [
    'DiagramLoadError',
    'RenderDecision',
    'RenderedDiagram',
    'ShapeBinding',
    'build_registry',
    'derive_signature',
    'fetch_diagram',
    'is_background_panel',
    'parse_diagram',
    'render_diagram',
    'resolve_style',
    'shape_centroid',
]
