"""Prompt Composer for docforge.

Composes the per-mode prompt that is appended to the assembled scenario
prompt on every step.
"""
import logging
from datetime import date
from typing import Dict, Optional, TYPE_CHECKING

from .registry import PromptRegistry, prompt_registry

if TYPE_CHECKING:
    from ..core.modes import ChatMode, ModeState

logger = logging.getLogger(__name__)

FIRST_MESSAGE_HINT = (
    "This is the first message. Focus on understanding what the user needs."
)
NO_GOAL = "Not yet defined"


def _substitute(template: str, template_vars: Dict[str, object], name: str) -> str:
    try:
        return template.format(**template_vars)
    except (KeyError, IndexError) as e:
        logger.warning(f"Missing template variable in {name}.prompt: {e}")
        # Fall back to partial substitution
        composed = template
        for key, value in template_vars.items():
            composed = composed.replace(f"{{{key}}}", str(value))
        return composed


class PromptComposer:
    """Composes mode prompts from the prompt files.

    Template variables available to mode prompts:
    - {goal}: Current goal, or "Not yet defined"
    - {todo_count}: Number of todos in the run
    - {message_count}: Number of user messages so far
    - {first_message_hint}: Guidance shown only before the first user message
    - {current_date}: ISO date of the run

    Example:
        composer = PromptComposer(registry)
        prompt = composer.compose_mode_prompt(
            mode=ChatMode.DISCOVERY,
            state=controller.state,
            message_count=0,
            current_date=date.today(),
            domain="sales",
        )
    """

    def __init__(self, registry: PromptRegistry = None):
        """Initialize the prompt composer.

        Args:
            registry: PromptRegistry instance. Defaults to the packaged prompts.
        """
        self._registry = registry or prompt_registry

    def get_core_prompt(self, domain: Optional[str] = None) -> str:
        """Immutable core system prompt."""
        return self._registry.get_prompt("system", "core", domain=domain).strip()

    def get_streaming_prompt(self, domain: Optional[str] = None) -> str:
        """Guidance for the streaming, tool-calling agent."""
        return self._registry.get_prompt("system", "streaming", domain=domain).strip()

    def compose_mode_prompt(
        self,
        mode: "ChatMode",
        state: "ModeState",
        message_count: int = 0,
        current_date: Optional[date] = None,
        domain: Optional[str] = None,
    ) -> str:
        """Compose the prompt for the current mode.

        Args:
            mode: Mode whose prompt to load (modes/{mode}.prompt).
            state: The run's ModeState (goal, todos, completion).
            message_count: Number of user messages in the conversation.
            current_date: Date to render. Defaults to today.
            domain: Optional domain id for prompt variants.

        Returns:
            The mode prompt, followed by the completion status when the
            run is marked complete.
        """
        template = self._registry.get_prompt("modes", mode.value, domain=domain)

        template_vars = {
            "goal": state.goal or NO_GOAL,
            "todo_count": len(state.todos),
            "message_count": message_count,
            "first_message_hint": FIRST_MESSAGE_HINT if message_count == 0 else "",
            "current_date": (current_date or date.today()).isoformat(),
        }
        composed = _substitute(template, template_vars, mode.value).strip()

        if state.is_complete:
            composed = f"{composed}\n\n{self.compose_completion_status(domain)}"

        logger.debug(
            f"Composed mode prompt: mode={mode.value}, complete={state.is_complete}, "
            f"length={len(composed)}"
        )
        return composed

    def compose_completion_status(self, domain: Optional[str] = None) -> str:
        """Status section shown while the conversation is marked complete."""
        return self._registry.get_prompt("layers", "completion", domain=domain).strip()


# Factory function for container registration
def create_prompt_composer(registry: PromptRegistry = None) -> PromptComposer:
    """Create a PromptComposer instance."""
    return PromptComposer(registry=registry)
