"""
Diagram walker.

Produces an interactive copy of a parsed diagram: every bindable shape is
restyled according to the plot it is joined to, tagged with ``data-*``
attributes, and (for saved plots) wrapped together with its overlay labels in
a group that takes the shape's original place among its siblings. Everything
else in the document is copied through untouched.
"""

from __future__ import annotations

import copy
import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional

from plotmap.domain.plots import Plot
from plotmap.domain.shapes import ShapeKind, ShapeNode, namespace_of
from plotmap.mapping.registry import build_registry
from plotmap.mapping.signature import derive_signature
from plotmap.mapping.styling import (
    Overlay,
    OverlayDisk,
    OverlayRule,
    OverlayText,
    RenderDecision,
    format_number,
    resolve_style,
)

logger = logging.getLogger(__name__)

PlotSelectHandler = Callable[[str, Any], None]
PlotHoverHandler = Callable[[Any, Optional[str], Optional[Plot]], None]


@dataclass
class ShapeBinding:
    """Event contract for one rendered shape."""

    signature: str
    decision: RenderDecision
    is_admin: bool
    on_plot_select: Optional[PlotSelectHandler] = None
    on_plot_hover: Optional[PlotHoverHandler] = None

    @property
    def plot(self) -> Optional[Plot]:
        return self.decision.plot

    def click(self) -> None:
        if not self.decision.is_interactive or self.on_plot_select is None:
            return
        if self.plot is not None:
            self.on_plot_select(self.signature, self.plot)
        elif self.is_admin:
            self.on_plot_select(self.signature, {"signature": self.signature})

    def hover_enter(self, event: Any = None) -> None:
        if self.on_plot_hover is None or self.plot is None or self.plot.is_road:
            return
        self.on_plot_hover(event, self.signature, self.plot)

    def hover_leave(self, event: Any = None) -> None:
        if self.on_plot_hover is not None:
            self.on_plot_hover(event, None, None)


@dataclass
class RenderedDiagram:
    root: ET.Element
    bindings: Dict[str, ShapeBinding] = field(default_factory=dict)

    def click(self, signature: str) -> None:
        binding = self.bindings.get(signature)
        if binding is not None:
            binding.click()

    def hover_enter(self, signature: str, event: Any = None) -> None:
        binding = self.bindings.get(signature)
        if binding is not None:
            binding.hover_enter(event)

    def hover_leave(self, signature: str, event: Any = None) -> None:
        binding = self.bindings.get(signature)
        if binding is not None:
            binding.hover_leave(event)

    def to_svg(self) -> str:
        return ET.tostring(self.root, encoding="unicode")


def render_diagram(
    root: ET.Element,
    plots: Iterable[Plot],
    selected_id: Optional[int],
    is_admin: bool,
    on_plot_select: Optional[PlotSelectHandler] = None,
    on_plot_hover: Optional[PlotHoverHandler] = None,
) -> RenderedDiagram:
    """Return an interactive copy of ``root``; the input tree is not modified."""
    registry = build_registry(plots)
    rendered = RenderedDiagram(root=copy.deepcopy(root))

    def rewrite(parent: ET.Element) -> None:
        for index, child in enumerate(list(parent)):
            if ShapeKind.from_tag(child.tag) is ShapeKind.OTHER:
                rewrite(child)
                continue
            try:
                replacement = _rewrite_shape(
                    child, registry, selected_id, is_admin,
                    rendered, on_plot_select, on_plot_hover,
                )
            except Exception:
                logger.exception("Failed to rewrite <%s> element, leaving it as is", child.tag)
                continue
            if replacement is not child:
                replacement.tail, child.tail = child.tail, None
                parent[index] = replacement

    if ShapeKind.from_tag(rendered.root.tag) is ShapeKind.OTHER:
        rewrite(rendered.root)
    return rendered


def _rewrite_shape(
    element: ET.Element,
    registry,
    selected_id: Optional[int],
    is_admin: bool,
    rendered: RenderedDiagram,
    on_plot_select: Optional[PlotSelectHandler],
    on_plot_hover: Optional[PlotHoverHandler],
) -> ET.Element:
    shape = ShapeNode.from_element(element)
    signature = derive_signature(shape)
    decision = resolve_style(shape, signature, registry, selected_id, is_admin)
    if decision.passthrough:
        return element

    _apply_style(element, decision)
    element.set("data-signature", signature)
    element.set("data-interactive", "true" if decision.is_interactive else "false")
    if decision.plot is not None:
        element.set("data-plot-id", str(decision.plot.id))
        element.set("data-status", decision.plot.status.value)

    rendered.bindings[signature] = ShapeBinding(
        signature=signature,
        decision=decision,
        is_admin=is_admin,
        on_plot_select=on_plot_select,
        on_plot_hover=on_plot_hover,
    )

    if decision.overlay is None:
        return element

    namespace = namespace_of(element.tag)
    group = ET.Element(_qualify("g", namespace), {"data-signature": signature})
    group.append(element)
    group.append(overlay_element(decision.overlay, namespace))
    return group


def _apply_style(element: ET.Element, decision: RenderDecision) -> None:
    style = parse_style(element.get("style"))
    style.update(
        {
            "fill": decision.fill_color,
            "cursor": decision.cursor,
            "transition": "all 0.2s ease",
            "stroke-width": decision.stroke_width,
            "stroke": decision.stroke_color,
            "pointer-events": decision.pointer_events,
        }
    )
    element.set("style", format_style(style))


def parse_style(raw: Optional[str]) -> Dict[str, str]:
    declarations: Dict[str, str] = {}
    if not raw:
        return declarations
    for chunk in raw.split(";"):
        name, sep, value = chunk.partition(":")
        if sep and name.strip():
            declarations[name.strip()] = value.strip()
    return declarations


def format_style(declarations: Dict[str, Optional[str]]) -> str:
    return "; ".join(
        f"{name}: {value}" for name, value in declarations.items() if value is not None
    )


def overlay_element(overlay: Overlay, namespace: Optional[str] = None) -> ET.Element:
    """Build the SVG elements for an overlay."""
    if overlay.is_road:
        return _item_element(overlay.items[0], namespace, pointer_transparent=True)

    group = ET.Element(_qualify("g", namespace), {"pointer-events": "none"})
    for item in overlay.items:
        group.append(_item_element(item, namespace))
    return group


def _item_element(item, namespace: Optional[str], pointer_transparent: bool = False) -> ET.Element:
    attrs: List[tuple] = []
    if isinstance(item, OverlayDisk):
        tag = "circle"
        attrs = [("cx", item.cx), ("cy", item.cy), ("r", item.r), ("fill", item.fill)]
    elif isinstance(item, OverlayRule):
        tag = "line"
        attrs = [
            ("x1", item.x1), ("y1", item.y1), ("x2", item.x2), ("y2", item.y2),
            ("stroke", item.stroke), ("stroke-width", item.stroke_width),
        ]
    elif isinstance(item, OverlayText):
        tag = "text"
        attrs = [
            ("x", item.x),
            ("y", item.y),
            ("fill", item.fill),
            ("font-size", item.font_size),
            ("font-weight", item.font_weight),
            ("text-anchor", "middle"),
            ("dominant-baseline", "middle"),
        ]
        if item.rotate is not None:
            attrs.append(
                ("transform", f"rotate({item.rotate} {format_number(float(item.x))} {format_number(float(item.y))})")
            )
        if item.style:
            attrs.append(("style", item.style))
    else:
        raise TypeError(f"Unknown overlay item: {item!r}")

    if pointer_transparent:
        attrs.append(("pointer-events", "none"))

    element = ET.Element(
        _qualify(tag, namespace),
        {name: _attr_value(value) for name, value in attrs},
    )
    if isinstance(item, OverlayText):
        element.text = item.text
    return element


def _attr_value(value) -> str:
    if isinstance(value, float):
        return format_number(value)
    return str(value)


def _qualify(tag: str, namespace: Optional[str]) -> str:
    return f"{{{namespace}}}{tag}" if namespace else tag
