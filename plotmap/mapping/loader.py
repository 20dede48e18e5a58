from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import Optional, Union

import requests

logger = logging.getLogger(__name__)

SVG_NAMESPACE = "http://www.w3.org/2000/svg"
XLINK_NAMESPACE = "http://www.w3.org/1999/xlink"

ET.register_namespace("", SVG_NAMESPACE)
ET.register_namespace("xlink", XLINK_NAMESPACE)


class DiagramLoadError(Exception):
    """Raised when a diagram cannot be fetched or parsed."""


def parse_diagram(source: Union[str, bytes]) -> ET.Element:
    """Parse an SVG document and return its root element."""
    if not source:
        raise DiagramLoadError("Diagram document is empty.")
    try:
        root = ET.fromstring(source)
    except ET.ParseError as exc:
        raise DiagramLoadError(f"Diagram is not valid XML: {exc}") from exc
    return root


def fetch_diagram(url: str, timeout: Optional[float] = None) -> ET.Element:
    """Download and parse a diagram from ``url``."""
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as exc:
        logger.error("Failed to load diagram from %s: %s", url, exc)
        raise DiagramLoadError(f"Failed to load diagram: {exc}") from exc
    return parse_diagram(response.content)
