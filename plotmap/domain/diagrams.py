from __future__ import annotations

from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class StoredDiagram:
    """Metadata returned after persisting an uploaded blueprint diagram."""

    original_filename: str
    stored_filename: str
    size_bytes: int
    shape_count: int
    bindable_count: int
    warnings: List[str]
