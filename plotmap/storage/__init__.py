from plotmap.storage.local import LocalFileStorage, LocalFileStorageError
from plotmap.storage.protocols import FileStorageGateway

__all__ = ["FileStorageGateway", "LocalFileStorage", "LocalFileStorageError"]
