from __future__ import annotations

import itertools
import logging
import random
from typing import Any, List, Optional, Set, Union

from plotmap.domain.plots import (
    Pending,
    Persisted,
    Plot,
    PlotKey,
    key_from_id,
    new_placeholder,
)
from plotmap.services.gateways import PlotGateway, PlotGatewayError

logger = logging.getLogger(__name__)

PlotRef = Union[int, Pending, Persisted, Plot]


class PlotSessionError(Exception):
    """Base exception raised for edit session issues."""


class PlotSaveError(PlotSessionError):
    """Raised when saving a plot fails; local state is unchanged."""


class PlotDeleteError(PlotSessionError):
    """Raised when deleting a plot fails; local state is unchanged."""


class PlotEditSession:
    """
    Admin-side working copy of the plot list.

    Owns the local plots, the set of plots with unsaved edits and the current
    selection. Every mutation goes through the methods below; the network
    calls (load, save, delete) go through the injected gateway.
    """

    def __init__(self, gateway: PlotGateway, plots: Optional[List[Plot]] = None) -> None:
        self._gateway = gateway
        self._plots: List[Plot] = list(plots or [])
        self._dirty: Set[PlotKey] = set()
        self._selected: Optional[PlotKey] = None
        self._temp_keys = itertools.count(1)

    # Read access

    @property
    def plots(self) -> List[Plot]:
        return list(self._plots)

    @property
    def dirty_keys(self) -> Set[PlotKey]:
        return set(self._dirty)

    @property
    def dirty_ids(self) -> Set[int]:
        return {key.wire_id for key in self._dirty}

    @property
    def selected_id(self) -> Optional[int]:
        return self._selected.wire_id if self._selected is not None else None

    @property
    def selected_plot(self) -> Optional[Plot]:
        if self._selected is None:
            return None
        return self._find(self._selected)

    def get(self, plot_id: PlotRef) -> Optional[Plot]:
        return self._find(self._key(plot_id))

    def is_dirty(self, plot_id: PlotRef) -> bool:
        return self._key(plot_id) in self._dirty

    # Loading and selection

    def load(self) -> List[Plot]:
        """Replace local state with the persisted plot list."""
        try:
            payload = self._gateway.list_plots()
        except PlotGatewayError as exc:
            raise PlotSessionError(f"Failed to load plots: {exc}") from exc
        self._plots = [Plot.from_wire_json(item) for item in payload]
        self._dirty.clear()
        self._selected = None
        logger.info("Loaded %d plot(s)", len(self._plots))
        return self.plots

    def select(self, plot_id: Optional[PlotRef]) -> Optional[Plot]:
        if plot_id is None:
            self._selected = None
            return None
        plot = self.get(plot_id)
        self._selected = plot.key if plot is not None else None
        return plot

    def clear_selection(self) -> None:
        self._selected = None

    def handle_shape_select(self, signature: str, plot: Any) -> Plot:
        """Selection handler for the admin map: bind unmatched shapes on click."""
        if isinstance(plot, Plot):
            local = self._find(plot.key)
            if local is not None:
                self._selected = local.key
                return local
        return self.create_from_signature(signature)

    # Local edits

    def update_field(self, plot_id: PlotRef, field: str, value: Any) -> bool:
        """Set one field and mark the plot dirty; unknown ids are ignored."""
        plot = self.get(plot_id)
        if plot is None:
            logger.debug("Ignoring update of unknown plot %r", plot_id)
            return False
        plot.set_field(field, value)
        self._dirty.add(plot.key)
        return True

    def create_from_signature(self, signature: str) -> Plot:
        """Start a new unsaved plot bound to ``signature`` and select it."""
        existing = self._find_by_signature(signature)
        if existing is not None:
            self._selected = existing.key
            return existing

        temp_key = next(self._temp_keys)
        plot = new_placeholder(
            signature,
            temp_key,
            plot_number=f"Plot-{random.randrange(1000)}",
        )
        self._plots.append(plot)
        self._dirty.add(plot.key)
        self._selected = plot.key
        logger.debug("Created placeholder %s for %s", plot.id, signature)
        return plot

    def discard_placeholder(self, plot_id: PlotRef) -> bool:
        """Drop an unsaved plot; persisted plots can only be deleted."""
        key = self._key(plot_id)
        if not isinstance(key, Pending):
            return False
        plot = self._find(key)
        if plot is None:
            return False
        self._plots.remove(plot)
        self._dirty.discard(key)
        if self._selected == key:
            self._selected = None
        return True

    # Persistence

    def save(self, plot: PlotRef) -> Plot:
        """Upsert one plot and replace the local copy with the stored one."""
        local = plot if isinstance(plot, Plot) else self.get(plot)
        if local is None:
            raise PlotSaveError(f"Plot {plot!r} is not part of this session.")

        try:
            response = self._gateway.upsert(local.to_upsert_json())
        except PlotGatewayError as exc:
            logger.warning("Saving plot %s failed: %s", local.id, exc)
            raise PlotSaveError(f"Error saving: {exc}") from exc
        if not response:
            raise PlotSaveError("Error saving: empty response from server.")
        try:
            saved = Plot.from_wire_json(response[0])
        except (TypeError, ValueError) as exc:
            raise PlotSaveError(f"Error saving: invalid response: {exc}") from exc

        old_key = local.key
        for index, candidate in enumerate(self._plots):
            if candidate.key == old_key:
                self._plots[index] = saved
                break
        else:
            self._plots.append(saved)
        if self._selected == old_key:
            self._selected = saved.key
        self._dirty.discard(old_key)
        logger.info("Plot %s saved successfully", saved.plot_number)
        return saved

    def delete(self, plot_id: PlotRef) -> bool:
        """Delete a persisted plot; unsaved placeholders are left alone."""
        key = self._key(plot_id)
        if not isinstance(key, Persisted):
            logger.warning("Refusing to delete unsaved plot %s; discard it instead", key.wire_id)
            return False
        if key.id <= 0:
            logger.warning("Refusing to delete plot with invalid id %s", key.id)
            return False

        try:
            self._gateway.delete(key.id)
        except PlotGatewayError as exc:
            logger.warning("Deleting plot %s failed: %s", key.id, exc)
            raise PlotDeleteError(f"Error deleting: {exc}") from exc

        self._plots = [plot for plot in self._plots if plot.key != key]
        self._dirty.discard(key)
        if self._selected == key:
            self._selected = None
        return True

    # Helpers

    @staticmethod
    def _key(plot_id: PlotRef) -> PlotKey:
        if isinstance(plot_id, Plot):
            return plot_id.key
        return key_from_id(plot_id)

    def _find(self, key: PlotKey) -> Optional[Plot]:
        for plot in self._plots:
            if plot.key == key:
                return plot
        return None

    def _find_by_signature(self, signature: str) -> Optional[Plot]:
        for plot in self._plots:
            if plot.signature == signature:
                return plot
        return None
