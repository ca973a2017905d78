"""Detection of mode, goal and completion signals in a finished step."""
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from .invocations import (
    SetCompleteInvocation,
    SetModeInvocation,
    StepRecord,
    ToolInvocation,
)
from .modes import ChatMode


@dataclass(frozen=True)
class TransitionSignal:
    """Request to move to another mode, extracted from a set_mode invocation."""
    mode: ChatMode
    reason: Optional[str] = None
    next_message: Optional[str] = None


@dataclass(frozen=True)
class GoalSignal:
    """A goal value reported by any tool result. None is a valid goal."""
    goal: Any


@dataclass(frozen=True)
class CompletionSignal:
    """Completion flag change reported by set_complete."""
    complete: bool
    reason: Optional[str] = None


@dataclass(frozen=True)
class StepSignals:
    """Everything detected in one step."""
    transition: Optional[TransitionSignal] = None
    goal: Optional[GoalSignal] = None
    completion: Optional[CompletionSignal] = None

    @property
    def has_transition(self) -> bool:
        return self.transition is not None


def _first_mode(invocations: Sequence[ToolInvocation]) -> Optional[SetModeInvocation]:
    for invocation in invocations:
        if isinstance(invocation, SetModeInvocation):
            return invocation
    return None


def _first_completion(invocations: Sequence[ToolInvocation]) -> Optional[SetCompleteInvocation]:
    for invocation in invocations:
        if isinstance(invocation, SetCompleteInvocation):
            return invocation
    return None


def detect_transitions(step: Optional[StepRecord]) -> StepSignals:
    """Inspect one step's tool activity.

    Tool results are searched before tool calls: a result reflects a
    completed action, a call from the same step is still in flight.
    The goal scan looks at tool results only and is independent of the
    mode search.

    Args:
        step: The previous step's record, or None before the first step.

    Returns:
        StepSignals with whichever signals were found.
    """
    if step is None or step.is_empty:
        return StepSignals()

    transition = None
    mode_invocation = _first_mode(step.tool_results) or _first_mode(step.tool_calls)
    if mode_invocation is not None:
        transition = TransitionSignal(
            mode=mode_invocation.mode,
            reason=mode_invocation.reason,
            next_message=mode_invocation.next_message,
        )

    goal = None
    for result in step.tool_results:
        if "goal" in result.payload:
            goal = GoalSignal(goal=result.payload["goal"])
            break

    completion = None
    complete_invocation = (
        _first_completion(step.tool_results) or _first_completion(step.tool_calls)
    )
    if complete_invocation is not None:
        completion = CompletionSignal(
            complete=complete_invocation.complete,
            reason=complete_invocation.reason,
        )

    return StepSignals(transition=transition, goal=goal, completion=completion)
