"""Set mode tool implementation.

Persists the requested mode on the chat, then announces the switch on
the output stream. The step orchestrator picks the switch up from this
tool's result at the next step boundary.
"""
import json
import logging
from typing import Any, Dict, Optional

from docforge.core.container import Container
from docforge.core.context import ExecutionContext
from docforge.core.exceptions import ModeValidationError
from docforge.core.interfaces.services import IChatStore
from docforge.core.interfaces.tool import ToolResult
from docforge.core.modes import ChatMode
from docforge.core.notifier import TransitionNotifier

logger = logging.getLogger(__name__)


class SetModeTool:
    """
    Tool for switching the agent's operating mode.

    Input is validated before anything is written. A failed write
    propagates unchanged and nothing is announced.
    """

    name = "set_mode"
    description = """Switch between discovery and build mode.
Use discovery mode to investigate the user's needs, search the knowledge base
and read existing documents. Use build mode to create documents and deliverables.

Call this when:
- You have enough context to start building (mode "build")
- You need more business context before continuing (mode "discovery")

Always give a short reason. Optionally pass nextMessage to continue
working right after the switch."""

    parameters = {
        "type": "object",
        "properties": {
            "mode": {
                "type": "string",
                "enum": [mode.value for mode in ChatMode],
                "description": "Mode to switch to"
            },
            "reason": {
                "type": "string",
                "description": "Why the switch is happening"
            },
            "nextMessage": {
                "type": "string",
                "description": "Optional message to continue with after the switch"
            }
        },
        "required": ["mode", "reason"]
    }

    def __init__(
        self,
        context: ExecutionContext,
        container: Container,
        chat_store: IChatStore = None,
    ):
        """
        Initialize the set mode tool.

        Args:
            context: Execution context.
            container: DI container for service resolution.
            chat_store: Optional chat store instance.
        """
        self._context = context
        self._container = container
        self._chat_store = chat_store or container.resolve(IChatStore)

    async def execute(
        self,
        params: Dict[str, Any],
        context: ExecutionContext,
    ) -> ToolResult:
        """
        Persist the mode switch and announce it.

        Args:
            params: Tool parameters (mode, reason, nextMessage).
            context: Execution context.

        Returns:
            ToolResult whose content is the JSON switch confirmation.

        Raises:
            ModeValidationError: On unknown mode or missing reason.
            PersistenceError: If the chat store write fails.
        """
        mode, reason, next_message = self._validate(params)

        notifier = TransitionNotifier(context.stream_writer)
        await notifier.commit(
            lambda: self._chat_store.update_chat_mode(context.conversation_id, mode),
            mode,
            reason,
            next_message,
        )

        logger.info(f"Chat {context.conversation_id} switched to {mode.value} mode: {reason}")

        return ToolResult(
            content=json.dumps({
                "success": True,
                "mode": mode.value,
                "reason": reason,
                "message": f"Switching to {mode.value} mode: {reason}",
                "continuation": next_message or None,
            }),
            success=True,
        )

    def _validate(self, params: Dict[str, Any]):
        mode = ChatMode.parse(params.get("mode"))
        if mode is None:
            raise ModeValidationError(
                f"Invalid mode {params.get('mode')!r}. "
                f"Must be one of: {[m.value for m in ChatMode]}"
            )

        reason = params.get("reason")
        if not isinstance(reason, str) or not reason.strip():
            raise ModeValidationError("A non-empty reason is required to switch modes")

        next_message: Optional[str] = params.get("nextMessage", params.get("next_message"))
        if next_message is not None and not isinstance(next_message, str):
            raise ModeValidationError("nextMessage must be a string")

        return mode, reason.strip(), next_message

    def to_schema(self) -> Dict[str, Any]:
        """Return tool schema for LLM function calling."""
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.parameters,
        }


def create_set_mode_tool(
    context: ExecutionContext,
    container: Container,
) -> SetModeTool:
    """
    Factory function to create set_mode tool.

    Args:
        context: Execution context.
        container: DI container.

    Returns:
        Configured SetModeTool instance.
    """
    return SetModeTool(context=context, container=container)
