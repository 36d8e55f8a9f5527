# Services module

from photoshare.services.storage import StorageService, LocalStorageService, get_storage_service
from photoshare.services.websocket_manager import WebSocketManager, ws_manager

__all__ = [
    "StorageService",
    "LocalStorageService",
    "get_storage_service",
    "WebSocketManager",
    "ws_manager",
]
