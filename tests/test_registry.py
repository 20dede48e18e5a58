from __future__ import annotations

from plotmap.domain.plots import Persisted, Plot
from plotmap.mapping.registry import build_registry


def make_plot(plot_id: int, signature: str, number: str = "") -> Plot:
    return Plot(key=Persisted(plot_id), signature=signature, plot_number=number)


def test_empty_plot_list_gives_empty_registry():
    assert build_registry([]) == {}


def test_registry_is_idempotent():
    plots = [make_plot(1, "rect-a"), make_plot(2, "poly-b")]
    assert build_registry(plots) == build_registry(plots)
    assert set(build_registry(plots)) == {"rect-a", "poly-b"}


def test_later_duplicate_signature_wins():
    first = make_plot(1, "rect-a", "first")
    second = make_plot(2, "rect-a", "second")
    registry = build_registry([first, second])
    assert registry["rect-a"] is second
