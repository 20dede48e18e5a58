from __future__ import annotations

from typing import Optional

from flask import Blueprint, Response, current_app, jsonify, request

from plotmap.app.container import get_diagram_service, get_plot_service
from plotmap.domain.plots import Plot
from plotmap.domain.viewport import INITIAL_SCALE, Viewport
from plotmap.mapping.walker import RenderedDiagram, format_style, parse_style, render_diagram
from plotmap.services.auth_service import AuthService
from plotmap.services.diagram_service import DiagramUnavailableError
from plotmap.services.plot_service import PlotError

map_bp = Blueprint("map", __name__)


@map_bp.get("/api/map.svg")
def render_map():
    """Render the blueprint with plots joined to their shapes."""
    rendered, error = _render_from_request()
    if error is not None:
        return error

    viewport = Viewport(
        scale=request.args.get("scale", default=INITIAL_SCALE, type=float),
        translate_x=request.args.get("tx", default=0.0, type=float),
        translate_y=request.args.get("ty", default=0.0, type=float),
    )
    viewport.set_rotation(request.args.get("rotation", default=0.0, type=float))
    _apply_viewport(rendered, viewport)
    return Response(rendered.to_svg(), mimetype="image/svg+xml")


@map_bp.get("/api/map/bindings")
def list_bindings():
    """Per-shape binding table of the current render, for client-side event dispatch."""
    rendered, error = _render_from_request()
    if error is not None:
        return error

    bindings = [
        {
            "signature": signature,
            "plotId": binding.plot.id if binding.plot else None,
            "interactive": binding.decision.is_interactive,
            "fill": binding.decision.fill_color,
        }
        for signature, binding in rendered.bindings.items()
    ]
    return jsonify({"bindings": bindings}), 200


def _render_from_request():
    """Render for the current request; returns (rendered, None) or (None, error response)."""
    view = request.args.get("view", "public")
    if view not in ("public", "admin"):
        return None, (jsonify({"message": f"Unknown view {view!r}."}), 400)
    is_admin = view == "admin"
    if is_admin and not AuthService.is_admin():
        return None, (jsonify({"message": "Admin login required."}), 401)

    raw_selected = request.args.get("selected", "")
    selected_id: Optional[int] = None
    if raw_selected:
        try:
            selected_id = int(raw_selected)
        except ValueError:
            return None, (jsonify({"message": "selected must be an integer."}), 400)

    try:
        root = get_diagram_service().load_diagram()
    except DiagramUnavailableError as exc:
        return None, (jsonify({"message": str(exc)}), 404)

    try:
        plots = [Plot.from_wire_json(item) for item in get_plot_service().list_plots()]
    except PlotError as exc:
        current_app.logger.error(f"Error loading plots for map: {exc}", exc_info=True)
        return None, (jsonify({"message": str(exc)}), 500)

    rendered: RenderedDiagram = render_diagram(root, plots, selected_id, is_admin)
    return rendered, None


def _apply_viewport(rendered: RenderedDiagram, viewport: Viewport) -> None:
    style = parse_style(rendered.root.get("style"))
    style["transform"] = viewport.css_transform()
    style["transform-origin"] = "center"
    rendered.root.set("style", format_style(style))
