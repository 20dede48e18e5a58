from __future__ import annotations

from pathlib import Path
from typing import Protocol


class FileStorageGateway(Protocol):
    """Byte store for uploaded diagrams, addressed by paths relative to its root."""

    def save_bytes(self, data: bytes, destination: Path) -> Path:
        ...

    def read_bytes(self, path: Path) -> bytes:
        ...

    def exists(self, path: Path) -> bool:
        ...
