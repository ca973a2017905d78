"""Set complete tool plugin.

Lets the model mark the conversation's task complete or reopen it.
"""
from .tool import SetCompleteTool, create_set_complete_tool

PLUGIN = {
    "type": "tool",
    "name": "set_complete",
    "class": SetCompleteTool,
    "factory": create_set_complete_tool,
    "category": "agent_state",
    "description": "Mark the conversation complete or incomplete",
}

__all__ = ["SetCompleteTool", "create_set_complete_tool", "PLUGIN"]
