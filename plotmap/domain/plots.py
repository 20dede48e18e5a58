"""
Domain model for plot records.

Plots travel over the wire with the field names used by the public JSON
contract (``plotNumber``, ``area_sqyds``, ``createdAt`` ...). Locally a plot
is identified by a PlotKey: either a Pending placeholder that has never been
saved or a Persisted database id. On the wire a pending key is encoded as a
negative id.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional, Union


class PlotStatus(str, enum.Enum):
    """Sales status of a plot."""

    AVAILABLE = "AVAILABLE"
    SOLD = "SOLD"
    HOLD = "HOLD"
    ROAD = "ROAD"


class Facing(str, enum.Enum):
    """Direction the plot's frontage faces."""

    EAST = "East"
    WEST = "West"
    NORTH = "North"
    SOUTH = "South"
    NORTH_EAST = "North-East"


@dataclass(frozen=True)
class Pending:
    """Key of a plot created locally and not yet saved."""

    temp_key: int

    @property
    def wire_id(self) -> int:
        return -self.temp_key


@dataclass(frozen=True)
class Persisted:
    """Key of a plot that has a database id."""

    id: int

    @property
    def wire_id(self) -> int:
        return self.id


PlotKey = Union[Pending, Persisted]


def key_from_id(plot_id: Union[int, Pending, Persisted]) -> PlotKey:
    """Map a legacy integer id (negative means pending) onto a PlotKey."""
    if isinstance(plot_id, (Pending, Persisted)):
        return plot_id
    if isinstance(plot_id, bool) or not isinstance(plot_id, int):
        raise TypeError(f"Plot id must be an integer, got {plot_id!r}")
    if plot_id < 0:
        return Pending(-plot_id)
    return Persisted(plot_id)


# Local attribute name -> wire name.
WIRE_NAMES: Dict[str, str] = {
    "signature": "signature",
    "plot_number": "plotNumber",
    "status": "status",
    "area_sqyds": "area_sqyds",
    "dim_top": "dim_top",
    "dim_right": "dim_right",
    "dim_bottom": "dim_bottom",
    "dim_left": "dim_left",
    "facing": "facing",
    "price_per_sqyd": "price_per_sqyd",
    "show_price_publicly": "show_price_publicly",
    "show_info_publicly": "show_info_publicly",
    "contact_role": "contact_role",
    "contact_name": "contact_name",
    "contact_number": "contact_number",
    "notes": "notes",
    "created_at": "createdAt",
    "updated_at": "updatedAt",
}

LOCAL_NAMES: Dict[str, str] = {wire: local for local, wire in WIRE_NAMES.items()}

# Wire fields the persistence layer assigns itself.
SERVER_MANAGED_FIELDS = ("id", "createdAt", "updatedAt")

DIMENSION_FIELDS = ("dim_top", "dim_right", "dim_bottom", "dim_left")

# The signature binds a plot to its shape; rebinding means a new plot.
READ_ONLY_FIELDS = ("signature", "created_at", "updated_at")


def parse_status(value: Any) -> PlotStatus:
    if isinstance(value, PlotStatus):
        return value
    try:
        return PlotStatus(str(value).upper())
    except ValueError:
        raise ValueError(f"Invalid plot status: {value!r}") from None


def parse_facing(value: Any) -> Optional[Facing]:
    if value is None or isinstance(value, Facing):
        return value
    if value == "":
        return None
    try:
        return Facing(value)
    except ValueError:
        raise ValueError(f"Invalid facing: {value!r}") from None


def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


@dataclass
class Plot:
    """A real-estate lot bound to one diagram shape through its signature."""

    key: PlotKey
    signature: str
    plot_number: str = ""
    status: PlotStatus = PlotStatus.AVAILABLE
    area_sqyds: float = 0.0
    dim_top: Optional[str] = None
    dim_right: Optional[str] = None
    dim_bottom: Optional[str] = None
    dim_left: Optional[str] = None
    facing: Optional[Facing] = None
    price_per_sqyd: Optional[float] = None
    show_price_publicly: bool = True
    show_info_publicly: bool = False
    contact_role: Optional[str] = None
    contact_name: Optional[str] = None
    contact_number: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def id(self) -> int:
        """Legacy integer id; negative for pending placeholders."""
        return self.key.wire_id

    @property
    def is_pending(self) -> bool:
        return isinstance(self.key, Pending)

    @property
    def is_road(self) -> bool:
        return self.status is PlotStatus.ROAD

    def copy(self, **changes: Any) -> "Plot":
        return replace(self, **changes)

    def set_field(self, name: str, value: Any) -> None:
        """Assign one attribute by local or wire name, coercing enums."""
        local = LOCAL_NAMES.get(name, name)
        if local not in WIRE_NAMES or local in READ_ONLY_FIELDS:
            raise ValueError(f"Unknown or read-only plot field: {name!r}")
        if local == "status":
            value = parse_status(value)
        elif local == "facing":
            value = parse_facing(value)
        elif local == "area_sqyds":
            value = float(value or 0)
        elif local == "price_per_sqyd":
            value = _optional_float(value)
        elif local in ("show_price_publicly", "show_info_publicly"):
            value = bool(value)
        setattr(self, local, value)

    def to_wire_json(self) -> Dict[str, Any]:
        """Convert to the JSON shape exchanged with the persistence API."""
        data: Dict[str, Any] = {"id": self.id}
        for local, wire in WIRE_NAMES.items():
            value = getattr(self, local)
            if isinstance(value, enum.Enum):
                value = value.value
            data[wire] = value
        if data["facing"] is None:
            data["facing"] = ""
        return data

    def to_upsert_json(self) -> Dict[str, Any]:
        """Wire JSON without the fields the persistence layer assigns."""
        data = self.to_wire_json()
        for name in SERVER_MANAGED_FIELDS:
            data.pop(name, None)
        return data

    @classmethod
    def from_wire_json(cls, data: Dict[str, Any]) -> "Plot":
        """Create a Plot from the persistence API's JSON."""
        if not data.get("signature"):
            raise ValueError("Plot signature is required")
        if "id" not in data or data["id"] is None:
            raise ValueError("Plot id is required")
        kwargs: Dict[str, Any] = {"key": key_from_id(int(data["id"]))}
        for f in fields(cls):
            if f.name == "key":
                continue
            wire = WIRE_NAMES[f.name]
            if wire in data:
                kwargs[f.name] = data[wire]
        plot = cls(**kwargs)
        plot.status = parse_status(plot.status)
        plot.facing = parse_facing(plot.facing)
        plot.area_sqyds = float(plot.area_sqyds or 0)
        plot.price_per_sqyd = _optional_float(plot.price_per_sqyd)
        plot.show_price_publicly = bool(plot.show_price_publicly)
        plot.show_info_publicly = bool(plot.show_info_publicly)
        return plot


def new_placeholder(signature: str, temp_key: int, plot_number: str = "") -> Plot:
    """Default field values for a plot created from an unbound shape."""
    return Plot(
        key=Pending(temp_key),
        signature=signature,
        plot_number=plot_number,
        status=PlotStatus.AVAILABLE,
        area_sqyds=0.0,
        dim_top="",
        dim_right="",
        dim_bottom="",
        dim_left="",
        facing=None,
        price_per_sqyd=None,
        show_price_publicly=True,
        show_info_publicly=False,
        contact_role="",
        contact_name="",
        contact_number="",
        notes="",
    )
