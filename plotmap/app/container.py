from __future__ import annotations

from flask import current_app

from plotmap.services import DiagramService, PlotService
from plotmap.services.auth_service import AuthService

PLOT_SERVICE_KEY = "plot_service"
DIAGRAM_SERVICE_KEY = "diagram_service"
AUTH_SERVICE_KEY = "auth_service"


def register_services(app) -> None:
    """Pre-instantiate core services and store them on the application."""
    with app.app_context():
        app.extensions[PLOT_SERVICE_KEY] = PlotService.from_app_config()
        app.extensions[DIAGRAM_SERVICE_KEY] = DiagramService.from_app_config()
        app.extensions[AUTH_SERVICE_KEY] = AuthService.from_app_config()


def get_plot_service() -> PlotService:
    """Return the shared plot service instance."""
    service = current_app.extensions.get(PLOT_SERVICE_KEY)
    if service is None:
        service = PlotService.from_app_config()
        current_app.extensions[PLOT_SERVICE_KEY] = service
    return service


def get_diagram_service() -> DiagramService:
    """Return the shared diagram service instance."""
    service = current_app.extensions.get(DIAGRAM_SERVICE_KEY)
    if service is None:
        service = DiagramService.from_app_config()
        current_app.extensions[DIAGRAM_SERVICE_KEY] = service
    return service


def get_auth_service() -> AuthService:
    """Return the shared auth service instance."""
    service = current_app.extensions.get(AUTH_SERVICE_KEY)
    if service is None:
        service = AuthService.from_app_config()
        current_app.extensions[AUTH_SERVICE_KEY] = service
    return service
