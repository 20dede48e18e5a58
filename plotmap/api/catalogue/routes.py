from __future__ import annotations

from flask import Blueprint, jsonify, request

from plotmap.app.container import get_plot_service
from plotmap.domain.plots import Plot, parse_facing
from plotmap.services.catalogue import (
    PlotFilter,
    compute_bounds,
    filter_plots,
    plot_stats,
    public_view,
)
from plotmap.services.plot_service import PlotError

catalogue_bp = Blueprint("catalogue", __name__)


@catalogue_bp.get("/api/catalogue")
def browse():
    """Filtered public listing with slider bounds and status counts."""
    args = request.args
    try:
        facing_arg = args.get("facing", "")
        criteria = PlotFilter(
            query=args.get("q", ""),
            area_range=_range(args, "min_area", "max_area"),
            price_range=_range(args, "min_price", "max_price"),
            facing=None if facing_arg in ("", "ALL") else parse_facing(facing_arg),
        )
    except ValueError as exc:
        return jsonify({"message": str(exc)}), 400

    try:
        plots = [Plot.from_wire_json(item) for item in get_plot_service().list_plots()]
    except PlotError as exc:
        return jsonify({"message": str(exc)}), 500

    matched = filter_plots(plots, criteria)
    return (
        jsonify(
            {
                "plots": [public_view(plot) for plot in matched],
                "bounds": compute_bounds(plots).to_json(),
                "stats": plot_stats(matched),
            }
        ),
        200,
    )


def _range(args, low_key: str, high_key: str):
    low = args.get(low_key, type=float)
    high = args.get(high_key, type=float)
    if low is None and high is None:
        return None
    return (
        low if low is not None else float("-inf"),
        high if high is not None else float("inf"),
    )
