"""Typed tool invocations observed during an inference step.

The inference engine reports tool calls (inputs the model issued) and tool
results (outputs of completed calls) as loosely shaped payloads. They are
parsed once, here, into a closed set of variants so that transition
detection is a type check rather than string sniffing.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from .modes import ChatMode

SET_MODE_TOOL_NAMES = frozenset({"set_mode", "setMode"})
SET_COMPLETE_TOOL_NAMES = frozenset({"set_complete", "setComplete"})

# Keys that may carry the continuation message, in lookup order.
# Tool inputs use nextMessage / next_message, set_mode results use continuation.
_CONTINUATION_KEYS = ("next_message", "nextMessage", "continuation")


@dataclass(frozen=True)
class SetModeInvocation:
    """A set_mode call or result carrying a valid mode."""
    mode: ChatMode
    reason: Optional[str] = None
    next_message: Optional[str] = None
    payload: Dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def tool_name(self) -> str:
        return "set_mode"


@dataclass(frozen=True)
class SetCompleteInvocation:
    """A set_complete call or result."""
    complete: bool
    reason: Optional[str] = None
    payload: Dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def tool_name(self) -> str:
        return "set_complete"


@dataclass(frozen=True)
class GenericInvocation:
    """Any other tool invocation (including malformed mode payloads)."""
    tool_name: str
    payload: Dict[str, Any] = field(default_factory=dict, compare=False)


ToolInvocation = Union[SetModeInvocation, SetCompleteInvocation, GenericInvocation]


@dataclass
class StepRecord:
    """Tool activity of one completed inference step."""
    tool_calls: List[ToolInvocation] = field(default_factory=list)
    tool_results: List[ToolInvocation] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.tool_calls and not self.tool_results


def _continuation(payload: Dict[str, Any]) -> Optional[str]:
    for key in _CONTINUATION_KEYS:
        value = payload.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def parse_invocation(tool_name: str, payload: Any) -> ToolInvocation:
    """Parse a raw tool name and payload into a typed invocation.

    A set_mode payload whose mode is not one of the known modes is
    returned as a GenericInvocation so it can never produce a signal.

    Args:
        tool_name: Name the tool was registered under.
        payload: Tool input (for calls) or decoded output (for results).

    Returns:
        The matching invocation variant.
    """
    data = payload if isinstance(payload, dict) else {}

    if tool_name in SET_MODE_TOOL_NAMES:
        mode = ChatMode.parse(data.get("mode"))
        if mode is not None:
            reason = data.get("reason")
            return SetModeInvocation(
                mode=mode,
                reason=reason if isinstance(reason, str) else None,
                next_message=_continuation(data),
                payload=data,
            )

    elif tool_name in SET_COMPLETE_TOOL_NAMES:
        complete = data.get("complete")
        if isinstance(complete, bool):
            reason = data.get("reason")
            return SetCompleteInvocation(
                complete=complete,
                reason=reason if isinstance(reason, str) else None,
                payload=data,
            )

    return GenericInvocation(tool_name=tool_name, payload=data)
