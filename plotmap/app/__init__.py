from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping, Optional

from flask import Flask

from plotmap.config import resolve_config
from plotmap.extensions import init_extensions
from plotmap.app.container import register_services


def create_app(
    config_name: str | None = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> Flask:
    """Application factory."""
    project_root = Path(__file__).resolve().parents[2]
    app = Flask(
        __name__,
        instance_relative_config=True,
        instance_path=str(project_root / "instance"),
    )

    config_class = resolve_config(config_name or os.getenv("FLASK_ENV"))
    app.config.from_object(config_class)
    if overrides:
        app.config.update(overrides)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))
    _ensure_instance_dir(app)

    init_extensions(app)
    register_services(app)
    _register_blueprints(app)
    return app


def _register_blueprints(app: Flask) -> None:
    from plotmap.api.auth.routes import auth_bp
    from plotmap.api.catalogue.routes import catalogue_bp
    from plotmap.api.diagram.routes import diagram_bp
    from plotmap.api.map.routes import map_bp
    from plotmap.api.plots.routes import plots_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(plots_bp)
    app.register_blueprint(diagram_bp)
    app.register_blueprint(map_bp)
    app.register_blueprint(catalogue_bp)


def _ensure_instance_dir(app: Flask) -> None:
    """Ensure instance directory exists; the diagram store lives below it by default."""
    Path(app.instance_path).mkdir(parents=True, exist_ok=True)
