"""Operating modes and per-run mode state."""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class ChatMode(str, Enum):
    """Operating phase of the agent.

    A closed two-state machine: both states are reachable from each other
    and either may be the final state of a run.
    """
    DISCOVERY = "discovery"
    BUILD = "build"

    @classmethod
    def parse(cls, value: Any) -> Optional["ChatMode"]:
        """Parse a raw mode value, returning None for anything unknown."""
        if isinstance(value, ChatMode):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class TodoStatus(str, Enum):
    """Progress of a single todo item."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass
class Todo:
    """A planned unit of work tracked across the run."""
    id: str
    content: str
    status: TodoStatus = TodoStatus.PENDING

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Todo":
        """Create Todo from a stored dict (e.g., chat record JSON)."""
        return cls(
            id=str(data["id"]),
            content=data.get("content", ""),
            status=TodoStatus(data.get("status", TodoStatus.PENDING.value)),
        )


@dataclass
class ModeHistoryEntry:
    """One recorded mode transition."""
    mode: ChatMode
    step_number: int
    timestamp: datetime
    reason: Optional[str] = None


@dataclass
class ModeState:
    """Mutable mode state for one conversation run.

    Created when a run starts and discarded when it ends. The history
    is never empty: it is seeded with the initial mode at step 0.
    """
    current_mode: ChatMode
    mode_history: List[ModeHistoryEntry]
    goal: Optional[str] = None
    todos: List[Todo] = field(default_factory=list)
    is_complete: bool = False

    @property
    def mode_set_at(self) -> datetime:
        """Timestamp of the most recent history entry."""
        return self.mode_history[-1].timestamp
