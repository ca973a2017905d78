"""Set complete tool implementation."""
import json
import logging
from typing import Any, Dict

from docforge.core.container import Container
from docforge.core.context import ExecutionContext
from docforge.core.exceptions import ModeValidationError
from docforge.core.interfaces.services import IChatStore
from docforge.core.interfaces.tool import ToolResult
from docforge.core.notifier import TransitionNotifier

logger = logging.getLogger(__name__)


class SetCompleteTool:
    """Tool for marking the conversation's task complete or incomplete."""

    name = "set_complete"
    description = """Mark the current task or conversation as complete, or reopen it.
Call with complete=true when the user's request has been fully delivered.
If the user asks for more help on a completed conversation, call with
complete=false before continuing."""

    parameters = {
        "type": "object",
        "properties": {
            "complete": {
                "type": "boolean",
                "description": "True to mark complete, false to reopen"
            },
            "reason": {
                "type": "string",
                "description": "Optional reason for the change"
            }
        },
        "required": ["complete"]
    }

    def __init__(
        self,
        context: ExecutionContext,
        container: Container,
        chat_store: IChatStore = None,
    ):
        self._context = context
        self._container = container
        self._chat_store = chat_store or container.resolve(IChatStore)

    async def execute(
        self,
        params: Dict[str, Any],
        context: ExecutionContext,
    ) -> ToolResult:
        """
        Persist the completion flag and announce it.

        Raises:
            ModeValidationError: If ``complete`` is not a boolean.
            PersistenceError: If the chat store write fails.
        """
        complete = params.get("complete")
        if not isinstance(complete, bool):
            raise ModeValidationError(f"complete must be a boolean, got {complete!r}")

        reason = params.get("reason")
        if reason is not None and not isinstance(reason, str):
            raise ModeValidationError("reason must be a string")

        notifier = TransitionNotifier(context.stream_writer)
        await notifier.commit_completion(
            lambda: self._chat_store.update_chat_completion(context.conversation_id, complete),
            complete,
            reason,
        )

        status = "complete" if complete else "incomplete"
        logger.info(f"Chat {context.conversation_id} marked {status}")

        return ToolResult(
            content=json.dumps({
                "success": True,
                "complete": complete,
                "reason": reason,
                "message": f"Conversation marked as {status}",
            }),
            success=True,
        )

    def to_schema(self) -> Dict[str, Any]:
        """Return tool schema for LLM function calling."""
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.parameters,
        }


def create_set_complete_tool(
    context: ExecutionContext,
    container: Container,
) -> SetCompleteTool:
    """Factory function to create set_complete tool."""
    return SetCompleteTool(context=context, container=container)
