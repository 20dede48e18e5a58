from __future__ import annotations

from typing import Dict, Iterable

from plotmap.domain.plots import Plot

PlotRegistry = Dict[str, Plot]


def build_registry(plots: Iterable[Plot]) -> PlotRegistry:
    """Index plots by signature for one render pass.

    Signatures are unique in storage; if two plots share one anyway the later
    plot in ``plots`` wins.
    """
    registry: PlotRegistry = {}
    for plot in plots:
        registry[plot.signature] = plot
    return registry
