"""
Public plot catalogue: filter bounds, filtering, sorting and the projection
of a plot that visitors are allowed to see.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from plotmap.domain.plots import Facing, Plot, PlotStatus

DEFAULT_AREA_RANGE: Tuple[float, float] = (0.0, 10000.0)
DEFAULT_PRICE_RANGE: Tuple[float, float] = (0.0, 500000.0)
BOUNDS_PADDING = 100.0


@dataclass(frozen=True)
class FilterBounds:
    min_area: float
    max_area: float
    min_price: float
    max_price: float

    def to_json(self) -> Dict[str, float]:
        return {
            "minArea": self.min_area,
            "maxArea": self.max_area,
            "minPrice": self.min_price,
            "maxPrice": self.max_price,
        }


@dataclass(frozen=True)
class PlotFilter:
    """Visitor filter; unset ranges default to the computed bounds."""

    query: str = ""
    area_range: Optional[Tuple[float, float]] = None
    price_range: Optional[Tuple[float, float]] = None
    facing: Optional[Facing] = None


def compute_bounds(plots: Iterable[Plot]) -> FilterBounds:
    """Slider bounds over non-road plots, padded so edge values stay selectable."""
    lots = [plot for plot in plots if plot.status is not PlotStatus.ROAD]
    if not lots:
        return FilterBounds(*DEFAULT_AREA_RANGE, *DEFAULT_PRICE_RANGE)

    areas = [plot.area_sqyds for plot in lots]
    prices = [
        plot.price_per_sqyd
        for plot in lots
        if plot.show_price_publicly and (plot.price_per_sqyd or 0) > 0
    ]
    min_area, max_area = min(areas), max(areas)
    min_price = min(prices) if prices else DEFAULT_PRICE_RANGE[0]
    max_price = max(prices) if prices else DEFAULT_PRICE_RANGE[1]
    return FilterBounds(
        min_area=_pad_down(min_area),
        max_area=max_area + BOUNDS_PADDING,
        min_price=_pad_down(min_price),
        max_price=max_price + BOUNDS_PADDING,
    )


def filter_plots(plots: Iterable[Plot], criteria: PlotFilter) -> List[Plot]:
    """
    Apply a visitor filter and sort by plot number.

    Roads always pass so the map keeps drawing them. Plots whose price is
    hidden only pass while the price range is left at its bounds.
    """
    plots = list(plots)
    bounds = compute_bounds(plots)
    area_low, area_high = criteria.area_range or (bounds.min_area, bounds.max_area)
    price_low, price_high = criteria.price_range or (bounds.min_price, bounds.max_price)
    price_untouched = (price_low, price_high) == (bounds.min_price, bounds.max_price)
    query = criteria.query.lower()

    def matches(plot: Plot) -> bool:
        if plot.status is PlotStatus.ROAD:
            return True
        if query not in (plot.plot_number or "").lower():
            return False
        if not area_low <= plot.area_sqyds <= area_high:
            return False
        if plot.show_price_publicly:
            price = plot.price_per_sqyd or 0
            if not price_low <= price <= price_high:
                return False
        elif not price_untouched:
            return False
        return criteria.facing is None or plot.facing is criteria.facing

    return sorted(filter(matches, plots), key=lambda plot: plot.plot_number or "")


def plot_stats(plots: Iterable[Plot]) -> Dict[str, int]:
    lots = [plot for plot in plots if plot.status is not PlotStatus.ROAD]
    return {
        "available": sum(1 for plot in lots if plot.status is PlotStatus.AVAILABLE),
        "sold": sum(1 for plot in lots if plot.status is PlotStatus.SOLD),
        "hold": sum(1 for plot in lots if plot.status is PlotStatus.HOLD),
        "total": len(lots),
    }


def public_view(plot: Plot) -> Dict[str, Any]:
    """What a visitor may see of a plot; notes are never included."""
    data: Dict[str, Any] = {
        "id": plot.id,
        "signature": plot.signature,
        "plotNumber": plot.plot_number,
        "status": plot.status.value,
        "area_sqyds": plot.area_sqyds,
        "dim_top": plot.dim_top,
        "dim_right": plot.dim_right,
        "dim_bottom": plot.dim_bottom,
        "dim_left": plot.dim_left,
        "facing": plot.facing.value if plot.facing else "",
        "price_per_sqyd": plot.price_per_sqyd if plot.show_price_publicly else None,
    }
    if plot.show_info_publicly:
        data.update(
            {
                "contact_role": plot.contact_role,
                "contact_name": plot.contact_name,
                "contact_number": plot.contact_number,
            }
        )
    return data


def _pad_down(value: float) -> float:
    return value - BOUNDS_PADDING if value > BOUNDS_PADDING else 0.0
