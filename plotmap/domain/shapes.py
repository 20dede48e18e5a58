"""
Domain model for vector shapes read from a floor-plan diagram.

A ShapeNode is a read-only view over one element of the parsed SVG tree. It
keeps the geometry exactly as written in the source document so that the
signature derived from it stays stable across parses of the same file.
"""

from __future__ import annotations

import enum
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Tuple


class ShapeKind(str, enum.Enum):
    """Primitive kinds that may be bound to a plot."""

    RECT = "rect"
    POLYGON = "polygon"
    PATH = "path"
    CIRCLE = "circle"
    OTHER = "other"

    @classmethod
    def from_tag(cls, tag: str) -> "ShapeKind":
        try:
            return cls(local_name(tag))
        except ValueError:
            return cls.OTHER


# Geometry attributes per kind, in signature order.
GEOMETRY_ATTRIBUTES: Dict[ShapeKind, Tuple[str, ...]] = {
    ShapeKind.RECT: ("x", "y", "width", "height"),
    ShapeKind.POLYGON: ("points",),
    ShapeKind.PATH: ("d",),
    ShapeKind.CIRCLE: ("cx", "cy", "r"),
    ShapeKind.OTHER: (),
}


def local_name(tag: str) -> str:
    """Strip the ``{namespace}`` prefix ElementTree puts on qualified tags."""
    if not isinstance(tag, str):
        return ""
    if tag.startswith("{"):
        return tag.rsplit("}", 1)[-1]
    return tag


def namespace_of(tag: str) -> Optional[str]:
    if isinstance(tag, str) and tag.startswith("{"):
        return tag[1:].split("}", 1)[0]
    return None


@dataclass(frozen=True)
class ShapeNode:
    """A diagram element together with its raw geometry payload."""

    kind: ShapeKind
    geometry: Mapping[str, str] = field(default_factory=dict)
    attributes: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_element(cls, element: ET.Element) -> "ShapeNode":
        kind = ShapeKind.from_tag(element.tag)
        attributes = dict(element.attrib)
        geometry = {
            name: attributes[name]
            for name in GEOMETRY_ATTRIBUTES[kind]
            if name in attributes
        }
        presentation = {
            name: value for name, value in attributes.items() if name not in geometry
        }
        return cls(kind=kind, geometry=geometry, attributes=presentation)

    @property
    def is_shape(self) -> bool:
        return self.kind is not ShapeKind.OTHER

    @property
    def has_complete_geometry(self) -> bool:
        return all(name in self.geometry for name in GEOMETRY_ATTRIBUTES[self.kind])

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Return a geometry or presentation attribute by its SVG name."""
        if name in self.geometry:
            return self.geometry[name]
        return self.attributes.get(name, default)
