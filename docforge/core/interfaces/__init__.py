"""Core interfaces for docforge (Dependency Inversion Principle)."""
from .tool import ITool, ToolResult, ICloseable
from .services import (
    StreamEvent,
    IChatStore,
    IStreamWriter,
    ICapabilitySource,
)

__all__ = [
    "ITool",
    "ToolResult",
    "ICloseable",
    # Service interfaces
    "StreamEvent",
    "IChatStore",
    "IStreamWriter",
    "ICapabilitySource",
]
