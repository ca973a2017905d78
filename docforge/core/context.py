"""Context objects for prompt assembly and tool execution."""
import asyncio
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Dict, List, Optional, TypeVar, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from .interfaces.services import ICapabilitySource, IStreamWriter

from .exceptions import RunCancelled

T = TypeVar("T")

# A context source is either the value itself or a zero-argument loader.
Loadable = Union[T, Callable[[], T]]


@dataclass
class Domain:
    """A business domain (e.g., sales, requirements) with its own guidance."""
    id: str
    label: str
    system_prompt: str
    allowed_layer_guidance: Optional[str] = None


@dataclass
class ArtifactType:
    """A kind of document the assistant can produce."""
    id: str
    name: str
    category: str  # "objective", "summary", "context", "objectiveActions"
    instruction_prompt: str
    template: Optional[str] = None


@dataclass
class Workspace:
    """Team workspace. ``context`` is the learned team context, if any."""
    id: str
    name: str
    context: Optional[str] = None


@dataclass
class Objective:
    """Current objective within a workspace."""
    id: str
    title: str
    context: Optional[str] = None
    goal: Optional[str] = None


@dataclass
class Capability:
    """A document type the agent can generate in a domain."""
    name: str
    description: str
    trigger_keywords: List[str] = field(default_factory=list)
    requires_source_documents: bool = False
    use_when: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Capability":
        """Create Capability from a dictionary (e.g., from YAML)."""
        return cls(
            name=data["name"],
            description=data.get("description", ""),
            trigger_keywords=list(data.get("trigger_keywords") or []),
            requires_source_documents=bool(data.get("requires_source_documents", False)),
            use_when=data.get("use_when"),
        )


@dataclass
class ContextBundle:
    """
    Everything a prompt layer may draw from.

    Domain, artifact type, workspace and objective may be given either as
    values or as zero-argument loaders. Loaders run lazily, at most once,
    and only when a layer in the active scenario asks for them.

    Example:
        bundle = ContextBundle(
            current_date=date(2025, 3, 1),
            domain=sales_domain,
            workspace=lambda: repo.load_workspace(workspace_id),
        )
        bundle.get_workspace()  # loader runs here
        bundle.get_workspace()  # cached
    """
    current_date: date
    domain: Optional[Loadable[Domain]] = None
    artifact_type: Optional[Loadable[ArtifactType]] = None
    workspace: Optional[Loadable[Workspace]] = None
    objective: Optional[Loadable[Objective]] = None
    user_name: Optional[str] = None
    capability_source: Optional["ICapabilitySource"] = None

    _resolved: Dict[str, Any] = field(default_factory=dict, init=False, repr=False, compare=False)

    def _resolve(self, name: str) -> Any:
        if name in self._resolved:
            return self._resolved[name]

        source = getattr(self, name)
        value = source() if callable(source) else source
        self._resolved[name] = value
        return value

    def get_domain(self) -> Optional[Domain]:
        return self._resolve("domain")

    def get_artifact_type(self) -> Optional[ArtifactType]:
        return self._resolve("artifact_type")

    def get_workspace(self) -> Optional[Workspace]:
        return self._resolve("workspace")

    def get_objective(self) -> Optional[Objective]:
        return self._resolve("objective")


@dataclass
class ExecutionContext:
    """
    Context for tool execution within one conversation run.

    Provides access to:
    - Conversation and user identity
    - Stream writer for events sent to the client
    - Cancellation support
    """
    conversation_id: str
    user_id: Optional[str] = None
    stream_writer: Optional["IStreamWriter"] = None

    # Cancellation support
    cancellation_token: asyncio.Event = field(default_factory=asyncio.Event)
    cancelled_reason: Optional[str] = None

    def cancel(self, reason: str = "Cancelled by user") -> None:
        """Signal cancellation to the running step."""
        self.cancelled_reason = reason
        self.cancellation_token.set()

    @property
    def is_cancelled(self) -> bool:
        return self.cancellation_token.is_set()

    async def check_cancelled(self) -> None:
        """Raise RunCancelled if the run has been cancelled."""
        if self.cancellation_token.is_set():
            raise RunCancelled(self.cancelled_reason or "Run cancelled")
