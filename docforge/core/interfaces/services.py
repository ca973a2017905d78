"""Service interfaces for dependency inversion."""
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Protocol

if TYPE_CHECKING:
    from ..context import Capability
    from ..modes import ChatMode


@dataclass(frozen=True)
class StreamEvent:
    """A typed event written to the client output stream.

    Transient events are UI signals only and are not kept in the
    conversation history; non-transient events are.
    """
    type: str
    data: Dict[str, Any] = field(default_factory=dict)
    transient: bool = True

    def to_dict(self) -> Dict[str, Any]:
        """Wire shape of the event."""
        return {
            "type": self.type,
            "data": dict(self.data),
            "transient": self.transient,
        }


class IChatStore(Protocol):
    """Interface for persisting per-chat agent state."""

    async def update_chat_mode(self, conversation_id: str, mode: "ChatMode") -> None:
        """Persist the chat's current mode.

        Raises:
            PersistenceError: If the write fails.
        """
        ...

    async def update_chat_completion(self, conversation_id: str, complete: bool) -> None:
        """Persist the chat's completion flag.

        Raises:
            PersistenceError: If the write fails.
        """
        ...


class IStreamWriter(Protocol):
    """Interface for the client-facing output stream."""

    async def write(self, event: StreamEvent) -> None:
        """Write one event to the stream."""
        ...


class ICapabilitySource(Protocol):
    """Interface for enumerating document capabilities per domain."""

    def list_capabilities(self, domain_id: str) -> List["Capability"]:
        """List capabilities registered for a domain.

        Raises:
            CapabilityEnumerationError: If the registry cannot be read.
        """
        ...
