from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from plotmap.app.container import get_plot_service
from plotmap.domain.plots import Plot
from plotmap.services.auth_service import AuthService, admin_required
from plotmap.services.catalogue import public_view
from plotmap.services.plot_service import (
    PlotError,
    PlotNotFoundError,
    PlotValidationError,
)

plots_bp = Blueprint("plots", __name__)


@plots_bp.get("/api/plots")
def list_plots():
    """List all plots ordered by plot number; visitors get the public projection."""
    service = get_plot_service()
    try:
        plots = service.list_plots()
    except PlotError as exc:
        current_app.logger.error(f"Error listing plots: {exc}", exc_info=True)
        return jsonify({"message": str(exc)}), 500

    if not AuthService.is_admin():
        plots = [public_view(Plot.from_wire_json(item)) for item in plots]
    return jsonify(plots), 200


@plots_bp.post("/api/plots")
@admin_required
def upsert_plots():
    """Insert or update one plot or a list of plots, keyed on signature."""
    data = request.get_json(silent=True)
    if data is None:
        return jsonify({"message": "Request body must be JSON."}), 400
    payloads = data if isinstance(data, list) else [data]

    service = get_plot_service()
    try:
        saved = service.upsert_plots(payloads)
        return jsonify(saved), 200
    except PlotValidationError as exc:
        return jsonify({"message": str(exc)}), 400
    except PlotError as exc:
        return jsonify({"message": str(exc)}), 500


@plots_bp.delete("/api/plots")
@admin_required
def delete_plot():
    """Delete one plot by id."""
    plot_id = request.args.get("id", type=int)
    if plot_id is None or plot_id <= 0:
        return jsonify({"message": "A positive plot id is required."}), 400

    service = get_plot_service()
    try:
        service.delete_plot(plot_id)
        return jsonify({"success": True}), 200
    except PlotNotFoundError as exc:
        return jsonify({"message": str(exc)}), 404
    except PlotError as exc:
        return jsonify({"message": str(exc)}), 500
