from __future__ import annotations

from flask import Blueprint, Response, current_app, jsonify, request

from plotmap.app.container import get_diagram_service
from plotmap.services.auth_service import admin_required
from plotmap.services.diagram_service import (
    DiagramStorageError,
    DiagramUnavailableError,
    UnsupportedDiagramError,
)

diagram_bp = Blueprint("diagram", __name__)

SVG_MIMETYPE = "image/svg+xml"


@diagram_bp.get("/api/diagram")
def get_diagram():
    """Serve the stored blueprint as uploaded."""
    service = get_diagram_service()
    try:
        content = service.read_diagram_bytes()
    except DiagramUnavailableError as exc:
        return jsonify({"message": str(exc)}), 404
    return Response(content, mimetype=SVG_MIMETYPE)


@diagram_bp.post("/api/diagram")
@admin_required
def upload_diagram():
    """Replace the blueprint with an uploaded SVG."""
    file = request.files.get("diagram")
    service = get_diagram_service()
    try:
        stored = service.save_diagram(file)
    except UnsupportedDiagramError as exc:
        return jsonify({"message": str(exc)}), 400
    except DiagramStorageError as exc:
        current_app.logger.error(f"Error storing diagram: {exc}", exc_info=True)
        return jsonify({"message": str(exc)}), 500

    return (
        jsonify(
            {
                "message": "Diagram stored successfully.",
                "payload": {
                    "originalFilename": stored.original_filename,
                    "storedFilename": stored.stored_filename,
                    "sizeBytes": stored.size_bytes,
                    "shapeCount": stored.shape_count,
                    "bindableCount": stored.bindable_count,
                    "warnings": stored.warnings,
                },
            }
        ),
        201,
    )
