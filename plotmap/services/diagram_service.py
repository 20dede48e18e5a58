from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Final, List

from flask import current_app
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from plotmap.domain.diagrams import StoredDiagram
from plotmap.domain.shapes import ShapeNode
from plotmap.mapping.loader import DiagramLoadError, parse_diagram
from plotmap.mapping.signature import derive_signature, is_background_panel
from plotmap.storage import LocalFileStorage, LocalFileStorageError
from plotmap.storage.protocols import FileStorageGateway

_ALLOWED_EXTENSIONS: Final[set[str]] = {"svg"}


class DiagramStorageError(Exception):
    """Base exception raised for diagram storage issues."""


class UnsupportedDiagramError(DiagramStorageError):
    """Raised when an uploaded diagram cannot be used."""


class DiagramUnavailableError(DiagramStorageError):
    """Raised when no usable diagram has been stored."""


class DiagramService:
    """Store the blueprint diagram and load it for rendering."""

    def __init__(self, storage: FileStorageGateway, filename: str) -> None:
        self._storage = storage
        self._filename = filename

    @classmethod
    def from_app_config(cls) -> "DiagramService":
        diagram_dir = Path(current_app.config["DIAGRAM_DIR"]).resolve()
        storage = LocalFileStorage(diagram_dir)
        return cls(storage=storage, filename=current_app.config["DIAGRAM_FILENAME"])

    @property
    def filename(self) -> str:
        return self._filename

    def has_diagram(self) -> bool:
        return self._storage.exists(Path(self._filename))

    def save_diagram(self, file_storage: FileStorage) -> StoredDiagram:
        """Validate an uploaded SVG and make it the current blueprint."""
        if not file_storage or not file_storage.filename:
            raise UnsupportedDiagramError("No diagram was provided.")

        original_filename = secure_filename(file_storage.filename)
        extension = self._extract_extension(original_filename)
        if extension not in _ALLOWED_EXTENSIONS:
            raise UnsupportedDiagramError("Unsupported diagram type. Upload an SVG file.")

        content = file_storage.read()
        if not content:
            raise DiagramStorageError("Uploaded file is empty.")

        try:
            root = parse_diagram(content)
        except DiagramLoadError as exc:
            raise UnsupportedDiagramError(str(exc)) from exc

        shape_count, bindable_count = self._count_shapes(root)
        warnings: List[str] = []
        if bindable_count == 0:
            warnings.append("Diagram contains no shapes that can be bound to plots.")

        try:
            self._storage.save_bytes(content, Path(self._filename))
        except LocalFileStorageError as exc:
            raise DiagramStorageError("Failed to write uploaded diagram.") from exc

        current_app.logger.info(
            f"Stored diagram {original_filename} as {self._filename} "
            f"({bindable_count} bindable of {shape_count} shapes)"
        )
        return StoredDiagram(
            original_filename=original_filename,
            stored_filename=self._filename,
            size_bytes=len(content),
            shape_count=shape_count,
            bindable_count=bindable_count,
            warnings=warnings,
        )

    def read_diagram_bytes(self) -> bytes:
        if not self.has_diagram():
            raise DiagramUnavailableError("No diagram available.")
        try:
            return self._storage.read_bytes(Path(self._filename))
        except LocalFileStorageError as exc:
            raise DiagramUnavailableError("No diagram available.") from exc

    def load_diagram(self) -> ET.Element:
        """Parse the stored diagram; any failure means no diagram is available."""
        content = self.read_diagram_bytes()
        try:
            return parse_diagram(content)
        except DiagramLoadError as exc:
            current_app.logger.error(f"Stored diagram is unreadable: {exc}")
            raise DiagramUnavailableError("No diagram available.") from exc

    @staticmethod
    def _count_shapes(root: ET.Element) -> tuple[int, int]:
        shapes = 0
        bindable = 0
        for element in root.iter():
            node = ShapeNode.from_element(element)
            if not node.is_shape:
                continue
            shapes += 1
            if derive_signature(node) is not None and not is_background_panel(node):
                bindable += 1
        return shapes, bindable

    @staticmethod
    def _extract_extension(filename: str) -> str:
        if "." not in filename:
            return ""
        return filename.rsplit(".", 1)[1].lower()
