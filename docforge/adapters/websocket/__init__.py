"""WebSocket adapters for docforge."""
from .stream_writer import WebSocketStreamWriter

__all__ = ["WebSocketStreamWriter"]
