"""Set mode tool plugin.

Lets the model switch the conversation between discovery and build mode.
"""
from .tool import SetModeTool, create_set_mode_tool

PLUGIN = {
    "type": "tool",
    "name": "set_mode",
    "class": SetModeTool,
    "factory": create_set_mode_tool,
    "category": "agent_state",
    "description": "Switch between discovery and build mode",
}

__all__ = ["SetModeTool", "create_set_mode_tool", "PLUGIN"]
