from plotmap.services.diagram_service import (
    DiagramService,
    DiagramStorageError,
    DiagramUnavailableError,
    UnsupportedDiagramError,
)
from plotmap.services.plot_service import (
    PlotError,
    PlotNotFoundError,
    PlotService,
    PlotStorageError,
    PlotValidationError,
)

__all__ = [
    "DiagramService",
    "DiagramStorageError",
    "DiagramUnavailableError",
    "PlotError",
    "PlotNotFoundError",
    "PlotService",
    "PlotStorageError",
    "PlotValidationError",
    "UnsupportedDiagramError",
]
