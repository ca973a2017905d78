"""docforge core - mode state machine, step orchestration and tool runtime."""
from .config import Config, ModeSettings, ModesConfig
from .context import (
    ArtifactType,
    Capability,
    ContextBundle,
    Domain,
    ExecutionContext,
    Objective,
    Workspace,
)
from .exceptions import (
    DocForgeError,
    ConfigError,
    ScenarioNotFoundError,
    ModeValidationError,
    PersistenceError,
    CapabilityEnumerationError,
    RequiredLayerError,
    RunCancelled,
)
from .modes import ChatMode, ModeHistoryEntry, ModeState, Todo, TodoStatus
from .invocations import (
    GenericInvocation,
    SetCompleteInvocation,
    SetModeInvocation,
    StepRecord,
    ToolInvocation,
    parse_invocation,
)
from .transitions import StepSignals, TransitionSignal, detect_transitions
from .mode_controller import ModeController
from .notifier import TransitionNotifier, build_mode_change_events
from .orchestrator import StepOrchestrator, StepPlan
from .registry import PluginRegistry
from .container import Container, create_container, ContainerError, ServiceNotFoundError
from .tool_factory import ToolFactory
from .hooks import StepCaptureHook, StepRecorder

__all__ = [
    # Configuration
    "Config",
    "ModeSettings",
    "ModesConfig",
    # Context
    "ArtifactType",
    "Capability",
    "ContextBundle",
    "Domain",
    "ExecutionContext",
    "Objective",
    "Workspace",
    # Exceptions
    "DocForgeError",
    "ConfigError",
    "ScenarioNotFoundError",
    "ModeValidationError",
    "PersistenceError",
    "CapabilityEnumerationError",
    "RequiredLayerError",
    "RunCancelled",
    "ContainerError",
    "ServiceNotFoundError",
    # Modes
    "ChatMode",
    "ModeHistoryEntry",
    "ModeState",
    "Todo",
    "TodoStatus",
    # Step activity
    "GenericInvocation",
    "SetCompleteInvocation",
    "SetModeInvocation",
    "StepRecord",
    "ToolInvocation",
    "parse_invocation",
    "StepSignals",
    "TransitionSignal",
    "detect_transitions",
    # Orchestration
    "ModeController",
    "TransitionNotifier",
    "build_mode_change_events",
    "StepOrchestrator",
    "StepPlan",
    # Tool runtime
    "PluginRegistry",
    "Container",
    "create_container",
    "ToolFactory",
    "StepCaptureHook",
    "StepRecorder",
]
